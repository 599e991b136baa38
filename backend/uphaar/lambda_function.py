"""
Serverless entry point: uphaar.lambda_function.lambda_handler.

The context and dispatcher are built once per execution environment (cold
start) and reused by every invocation.
"""

import logging

from uphaar.adapters.serverless import ServerlessHandler
from uphaar.config import settings
from uphaar.context import build_context
from uphaar.logs import setup_logging

setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

try:
    settings.validate_required_for_production()
except ValueError as e:
    logger.error("Configuration error: %s", str(e))

lambda_handler = ServerlessHandler.from_context(build_context(settings))
