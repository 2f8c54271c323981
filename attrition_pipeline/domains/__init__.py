"""Domain pipelines: attendance ingestion and attrition scoring."""
