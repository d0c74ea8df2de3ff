import logging

logger = logging.getLogger("dbgview")
logger.setLevel(logging.INFO)
