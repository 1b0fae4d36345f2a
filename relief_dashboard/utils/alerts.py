import logging

import requests
from twilio.base.exceptions import TwilioException
from twilio.rest import Client

from relief_dashboard import config

logger = logging.getLogger(__name__)


def send_sms(phone: str, message: str) -> bool:
    if not config.is_sms_configured():
        logger.info(f"[MOCK SMS] to {phone}: {message}")
        return True
    try:
        client = Client(config.TWILIO_SID, config.TWILIO_AUTH)
        client.messages.create(
            to=phone,
            from_=config.TWILIO_PHONE,
            body=message
        )
        return True
    except (TwilioException, requests.exceptions.RequestException):
        logger.exception(f"SMS to {phone} failed")
        return False


def format_alert_sms(alert) -> str:
    area = f" ({alert.affected_area})" if alert.affected_area else ""
    return f"🚨 {alert.severity.upper()} ALERT{area}: {alert.title}. {alert.message}"
