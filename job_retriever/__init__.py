"""
Job posting retrieval pipeline.

Fetches a job posting through a remote headless browser, extracts a
structured job record, enriches the hiring company from secondary sources and
normalizes everything into a complete JobData record.
"""

from job_retriever.core.config import RetrieverConfig
from job_retriever.pipeline.retriever import JobRetriever
from job_retriever.pipeline.schema import JobData

__version__ = "0.1.0"

__all__ = ["JobData", "JobRetriever", "RetrieverConfig", "__version__"]
