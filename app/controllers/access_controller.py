# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: whitelist gate and event announcement emails."""
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from app.core.dependencies import get_email_client, get_member_service
from app.core.logging import get_logger
from app.schemas import EmailRequest, WhitelistRequest, WhitelistResponse
from app.services.email_client import EmailClient, EmailDeliveryError, parse_recipients
from app.services.member_service import MemberService

router = APIRouter(tags=["Access"])
logger = get_logger(__name__)


@router.post("/check-whitelist", response_model=WhitelistResponse)
def check_whitelist(body: WhitelistRequest,
                    service: MemberService = Depends(get_member_service)):
    if not body.email:
        return JSONResponse(
            status_code=400,
            content={"isWhitelisted": False, "message": "Email is required"},
        )
    if service.check_whitelist(body.email):
        return {"isWhitelisted": True, "message": "Email is whitelisted"}
    return {"isWhitelisted": False, "message": "Email not found in authorized members list"}


@router.post("/send-email")
def send_email(body: EmailRequest,
               client: EmailClient = Depends(get_email_client)):
    recipients = parse_recipients(body.recipients or "")
    if not recipients or not body.body:
        raise HTTPException(status_code=400, detail="Recipients and body are required")
    try:
        client.send_announcement(recipients, body.subject, body.body)
    except EmailDeliveryError as exc:
        logger.error("Error sending email: %s", exc)
        return JSONResponse(status_code=500, content={"message": "Failed to send email"})
    return {"message": "Emails sent successfully", "recipients": len(recipients)}
