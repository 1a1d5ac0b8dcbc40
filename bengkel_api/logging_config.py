import logging
import os
import opentelemetry.trace
from azure.monitor.opentelemetry import configure_azure_monitor

# Only export to Application Insights when running inside Azure Functions
if os.environ.get("FUNCTIONS_WORKER_RUNTIME"):
    try:
        configure_azure_monitor()
        logging.info("Azure Monitor OpenTelemetry configured successfully")
    except Exception as e:
        logging.error(f"Error configuring Azure Monitor: {str(e)}")

tracer = opentelemetry.trace.get_tracer("bengkel_api")

logger = logging.getLogger("bengkel_api")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
logger.setLevel(LOG_LEVEL)

if not logger.handlers:
    console_handler = logging.StreamHandler()
    console_handler.setLevel(LOG_LEVEL)

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)

def get_child_logger(name):
    """Get a child logger with the given name."""
    return logger.getChild(name)
