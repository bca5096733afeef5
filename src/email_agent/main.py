"""
Command line entry point for the Email Agent.

Runs a quick check of the configuration, the generation API key and the
draft formatter, then points at the dashboard and API entry points.
"""

import asyncio
import sys

from email_agent.ai_processing import LLMManager
from email_agent.config import ApiKeyStore, get_config, validate_config
from email_agent.email_composer import UserProfile, build_fallback_email
from email_agent.utils import get_workflow_logger, setup_logging

async def test_system_components() -> bool:
    """Check that the system components are usable."""
    logger = get_workflow_logger()
    logger.info("Starting system component checks")

    config = get_config()
    validation_issues = validate_config()

    if validation_issues["errors"]:
        logger.warning(f"Configuration errors: {validation_issues['errors']}")
        logger.info("⚠️ Configuration has errors but the dashboard can still start")

    if validation_issues["warnings"]:
        logger.warning(f"Configuration warnings: {validation_issues['warnings']}")

    logger.info("✅ Configuration system working")

    # Generation key
    store = ApiKeyStore(config.llm)
    llm_manager = LLMManager(config.llm, store)
    logger.info(f"Provider info: {llm_manager.get_provider_info()}")

    if store.has_key:
        valid, error = await llm_manager.validate_api_key(store.get())
        if valid:
            logger.info("✅ Generation API key working")
        else:
            logger.warning(f"⚠️ Generation API key check failed: {error}")
    else:
        logger.warning("⚠️ No generation API key configured - only custom templates will work")

    # Formatter
    profile = UserProfile.with_default_fields("Test User")
    profile.email_purpose.position = "Software Engineer"
    profile.update_contact_field("email", value="test@example.com")
    draft = build_fallback_email("Company Name: Example Corp\nRecipient Name: Hiring Team", profile)
    if "Best regards," not in draft or "Email: test@example.com" not in draft:
        logger.error("❌ Draft formatter produced an unexpected layout")
        return False
    logger.info("✅ Draft formatter working")

    logger.info("🎉 System checks finished")
    return True

async def main() -> int:
    """Main application entry point."""
    setup_logging()
    logger = get_workflow_logger()

    logger.info("Starting Job Application Email Agent")

    if await test_system_components():
        logger.info("System is ready for use!")

        logger.info("\n" + "=" * 50)
        logger.info("NEXT STEPS:")
        logger.info("1. Configure your .env file with GROQ_API_KEY (or enter a key in Settings)")
        logger.info("2. Run the dashboard: streamlit run src/email_agent/ui/app.py")
        logger.info("3. Or run the HTTP API: email-agent-api")
        logger.info("=" * 50)
    else:
        logger.error("System checks failed. Please check configuration.")
        return 1

    return 0

def run():
    sys.exit(asyncio.run(main()))

if __name__ == "__main__":
    run()
