"""
tablestack Pulumi program: provisions one DynamoDB table from table.yaml.
Run through `tablestack create <table.yaml>`, which sets TABLE_YAML_PATH and aws:region.
"""
from tablestack.config import create_aws_provider, load_table_config
from tablestack.program import provision_table
from tablestack.resolver import DEFAULT_REGION

config = load_table_config()
aws_provider = create_aws_provider(config.region or DEFAULT_REGION)
outputs = provision_table(config, aws_provider)
outputs.export()
