from zapier_graphql.logger import get_logger

__author__ = """Jacob Thomason"""
__version__ = "2.1.0"

log = get_logger("zapier_graphql")
