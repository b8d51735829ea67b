import os
import sys
import uvicorn
import logging
import traceback

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)

# Add the src directory to Python path
current_dir = os.path.dirname(os.path.abspath(__file__))
src_path = os.path.join(current_dir, 'src')
sys.path.insert(0, src_path)

logger.info("=" * 60)
logger.info("ClinicBook Backend Startup")
logger.info("=" * 60)
logger.info(f"Python version: {sys.version.split()[0]}")
logger.info(f"Source path: {src_path}")

# Log critical environment variables (without exposing secrets)
logger.info("Environment Configuration:")
logger.info(f"  PORT: {os.environ.get('PORT', '8000')}")
logger.info(f"  APP_ENV: {os.environ.get('APP_ENV', 'not set')}")
logger.info(f"  STORE_BACKEND: {os.environ.get('STORE_BACKEND', 'mongo')}")
logger.info(f"  MONGO_URI: {'set' if os.environ.get('MONGO_URI') else 'not set'}")
logger.info(f"  MONGO_DB_NAME: {os.environ.get('MONGO_DB_NAME', 'not set')}")
logger.info(f"  BOOKING_TIMEZONE: {os.environ.get('BOOKING_TIMEZONE', 'Asia/Manila')}")
logger.info(f"  API_KEYS: {'set' if os.environ.get('API_KEYS') else 'not set (admin endpoints will reject all requests)'}")
logger.info(f"  EMAILJS_ENABLED: {os.environ.get('EMAILJS_ENABLED', 'false')}")

if __name__ == "__main__":
    try:
        from clinicbook.core.config import get_settings

        try:
            settings = get_settings()
        except ValueError as ve:
            logger.error(f"Configuration validation failed: {ve}")
            logger.error(traceback.format_exc())
            logger.error("Common configuration issues:")
            logger.error("  1. MONGO_URI must start with mongodb:// or mongodb+srv://")
            logger.error("  2. BOOKING_TIMEZONE must be a valid IANA timezone name")
            logger.error("  3. STORE_BACKEND must be 'mongo' or 'memory'")
            sys.exit(1)

        port = int(os.environ.get("PORT", settings.port))
        host = os.environ.get("HOST", settings.host)
        logger.info(f"  App: {settings.app_name} v{settings.app_version} ({settings.app_env})")

        try:
            from clinicbook.app import app  # noqa: F401
        except Exception as import_error:
            logger.error(f"Failed to import clinicbook.app: {import_error}")
            logger.error(traceback.format_exc())
            sys.exit(1)

        logger.info(f"Starting uvicorn server on {host}:{port}...")
        uvicorn.run(
            "clinicbook.app:app",
            host=host,
            port=port,
            workers=1,
            log_level="info",
            access_log=True,
            timeout_keep_alive=75,
            timeout_graceful_shutdown=30,
        )
    except KeyboardInterrupt:
        logger.info("Shutting down due to keyboard interrupt")
        sys.exit(0)
    except Exception as e:
        logger.error(f"CRITICAL: Failed to start application: {e} ({type(e).__name__})")
        logger.error(traceback.format_exc())
        sys.exit(1)
