"""
HTTP API

FastAPI application exposing draft generation, sending and the validation
helpers used by the dashboard. All collaborators are built once per app by
``create_app`` and can be replaced for tests.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

import uvicorn
from fastapi import APIRouter, FastAPI
from fastapi.responses import JSONResponse

from .schemas import ApiKeyRequest, GenerateRequest, SendRequest, SenderConfigModel
from ..ai_processing import LLMManager
from ..config import ApiKeyStore, AppConfig, get_config
from ..document_manager import CompanyRow
from ..email_composer import DraftComposer, EmailDrafter, GenerationError, ProfileIncompleteError
from ..mailer import Attachment, EmailData, EmailService
from ..mailer.email_service import TransportFactory
from ..utils import get_api_logger, setup_logging
from ..utils.pacing import SleepFunc

logger = get_api_logger()

MISSING_PROFILE_ERROR = "Missing user profile information. Please configure your profile first."
GENERIC_GENERATION_ERROR = "Failed to generate email. Please try again."
MISSING_KEY_ERROR = (
    "Generation API key not configured. Please set GROQ_API_KEY (or OPENROUTER_API_KEY) "
    "or configure it in the API settings."
)
GMAIL_CONFIG_ERROR = "Gmail authentication failed. Make sure you're using an App Password, not your regular password."
INVALID_CONFIG_ERROR = "Invalid email configuration. Please check your credentials."

def _error(message: str, status_code: int, **extra) -> JSONResponse:
    return JSONResponse({"error": message, **extra}, status_code=status_code)

def create_app(
    config: Optional[AppConfig] = None,
    llm_manager: Optional[LLMManager] = None,
    api_key_store: Optional[ApiKeyStore] = None,
    sleep: Optional[SleepFunc] = None,
    transport_factory: Optional[TransportFactory] = None
) -> FastAPI:
    """Build the API with its own key store, model client and composer."""
    config = config or get_config()
    api_key_store = api_key_store or ApiKeyStore(config.llm)
    llm_manager = llm_manager or LLMManager(config.llm, api_key_store)
    drafter = EmailDrafter(DraftComposer(llm_manager, config.composer, sleep=sleep))

    router = APIRouter(tags=["email-agent"])

    @router.post("/generate")
    async def generate_email(request: GenerateRequest):
        if not (request.company_name and request.hr_email and request.resume_text):
            return _error("Missing required fields: companyName, hrEmail, or resumeText", 400)

        if request.user_profile is None:
            return _error(MISSING_PROFILE_ERROR, 400)

        profile = request.user_profile.to_profile()
        missing = profile.missing_fields(require_contact=False)
        if missing:
            return _error(MISSING_PROFILE_ERROR, 400, details=missing)

        company = CompanyRow(
            company_name=request.company_name,
            hr_email=request.hr_email,
            recipient_name=request.recipient_name
        )
        custom_template = request.custom_template if request.use_custom_template else None

        if not (custom_template and custom_template.strip()) and not llm_manager.has_api_key():
            return _error(MISSING_KEY_ERROR, 500)

        try:
            content = await drafter.draft(company, profile, request.resume_text, custom_template)
        except ProfileIncompleteError as e:
            return _error(MISSING_PROFILE_ERROR, 400, details=e.missing)
        except GenerationError as e:
            logger.error(f"Generation failed for {company.company_name} ({e.kind.value}): {e}")
            return _error(GENERIC_GENERATION_ERROR, 500)

        return {"emailContent": content}

    @router.post("/send")
    def send_email(request: SendRequest):
        # Plain def: FastAPI runs it in its thread pool while smtplib blocks
        if not (request.to and request.subject and request.body):
            return _error("Missing required fields: to, subject, or body", 400)

        if request.sender_config is None:
            return _error(
                "Email configuration required. Please configure your email settings in the application.", 400
            )

        email_config = request.sender_config.to_email_config()
        if not email_config.user or not email_config.password:
            return _error(
                "Email credentials not configured. Please set up your email settings in the application.", 400
            )

        errors = email_config.validation_errors()
        if errors:
            logger.warning(f"Rejected email configuration for service {email_config.service}")
            return _error(INVALID_CONFIG_ERROR, 400, details=errors)

        attachments = []
        if request.resume_file:
            attachment = Attachment(filename=config.mail.attachment_filename, content=request.resume_file)
            try:
                attachment.payload()
            except ValueError as e:
                return _error(str(e), 400)
            attachments.append(attachment)

        service = EmailService(email_config, config.mail, transport_factory)
        result = service.send_email(EmailData(
            to=request.to,
            subject=request.subject,
            body=request.body,
            attachments=attachments
        ))

        if not result.success:
            return _error(result.error or "Failed to send email", 500)

        return {
            "success": True,
            "message": "Email sent successfully",
            "messageId": result.message_id,
            "sentAt": datetime.now(timezone.utc).isoformat()
        }

    @router.post("/validate-email-config")
    def validate_email_config(request: SenderConfigModel):
        email_config = request.to_email_config()
        if not email_config.user or not email_config.password:
            return _error("Missing email credentials", 400)

        errors = email_config.validation_errors()
        if errors:
            message = GMAIL_CONFIG_ERROR if email_config.service == "gmail" else INVALID_CONFIG_ERROR
            return _error(message, 400, details=errors)

        return {"valid": True, "message": "Email configuration is valid"}

    @router.post("/validate-api-key")
    async def validate_api_key(request: ApiKeyRequest):
        if not request.api_key:
            return JSONResponse({"valid": False, "error": "API key is required"}, status_code=400)

        valid, error = await llm_manager.validate_api_key(request.api_key)
        if not valid:
            return JSONResponse({"valid": False, "error": error}, status_code=400)
        return {"valid": True}

    @router.post("/api-key")
    def update_api_key(request: ApiKeyRequest):
        if not (request.api_key or "").strip():
            return _error("API key is required", 400)
        api_key_store.set(request.api_key)
        return {"success": True}

    @router.get("/api-key")
    def get_api_key_status() -> Dict[str, Any]:
        return {"hasApiKey": api_key_store.has_key, "maskedKey": api_key_store.masked()}

    app = FastAPI(title="Email Agent API")
    app.include_router(router)
    app.state.api_key_store = api_key_store
    app.state.llm_manager = llm_manager
    return app

def main():
    """Run the API server."""
    config = get_config()
    setup_logging(config)
    logger.info(f"Starting API on {config.api.host}:{config.api.port}")
    uvicorn.run(create_app(config), host=config.api.host, port=config.api.port)

if __name__ == "__main__":
    main()
