"""
es-importer: stream a CSV file into an Elasticsearch index via the _bulk API.
"""

__version__ = "0.1.0"
