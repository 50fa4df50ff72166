"""
알림 메일 템플릿 렌더링
"""
from html import escape
from typing import Tuple

from core.order_config import NotificationType
from schemas.notifications import NotificationData

_BUTTON_STYLE = (
    "display: inline-block; padding: 12px 24px; background-color: #000; color: #fff; "
    "text-decoration: none; border-radius: 6px; margin-top: 16px;"
)
_FOOTNOTE_STYLE = "color: #666; font-size: 14px;"


def _text(value, fallback: str = "") -> str:
    return escape(value) if value else fallback


def _render_new_order(data: NotificationData) -> Tuple[str, str]:
    subject = f"New Menublend demo dish order – {data.restaurant_name or ''}".rstrip()
    html = f"""
      <h1>New Demo Dish Order</h1>
      <p>A new demo dish order has been submitted!</p>
      <h2>Order Details:</h2>
      <ul>
        <li><strong>Restaurant:</strong> {_text(data.restaurant_name)}</li>
        <li><strong>Location:</strong> {_text(data.city, "N/A")}, {_text(data.country, "N/A")}</li>
        <li><strong>Dish Name:</strong> {_text(data.dish_name)}</li>
        <li><strong>Reference:</strong> {_text(data.internal_reference)}</li>
      </ul>
      <p>
        <a href="{_text(data.dashboard_url)}" style="{_BUTTON_STYLE}">View Order in Admin Dashboard</a>
      </p>
      <p style="{_FOOTNOTE_STYLE} margin-top: 24px;">This is an automated notification from Menublend.</p>
    """
    return subject, html


def _render_order_ready(data: NotificationData) -> Tuple[str, str]:
    subject = "Your Menublend demo dish is ready for review"
    html = f"""
      <h1>Your Demo Dish is Ready!</h1>
      <p>Great news! Your demo dish <strong>{_text(data.dish_name)}</strong> has been processed and is ready for review.</p>
      <p>
        <a href="{_text(data.dashboard_url)}" style="{_BUTTON_STYLE}">View Your Dish</a>
      </p>
      <p style="{_FOOTNOTE_STYLE} margin-top: 24px;">
        If you have any questions or feedback, please don't hesitate to contact us.
      </p>
      <p style="{_FOOTNOTE_STYLE}">Best regards,<br>The Menublend Team</p>
    """
    return subject, html


def _render_order_delivered(data: NotificationData) -> Tuple[str, str]:
    subject = "Your Menublend 3D/AR demo is live!"
    html = f"""
      <h1>Your 3D/AR Demo is Live! 🎉</h1>
      <p>Your demo dish <strong>{_text(data.dish_name)}</strong> is now live and ready to share!</p>
      <h2>Your Public Demo Page:</h2>
      <p>
        <a href="{_text(data.demo_url)}" style="{_BUTTON_STYLE} margin: 16px 0;">View Public Demo</a>
      </p>
      <p>You can share this link with anyone. Guests can view your dish in 3D/AR directly from their browser - no app download needed!</p>
      <h3>Next Steps:</h3>
      <ul>
        <li>Test the demo on your mobile device</li>
        <li>Share the link on your social media</li>
        <li>Add a QR code to your physical menu (available in your dashboard)</li>
        <li>Embed it on your website</li>
      </ul>
      <p style="{_FOOTNOTE_STYLE} margin-top: 24px;">
        Questions? We're here to help.<br>
        Best regards,<br>The Menublend Team
      </p>
    """
    return subject, html


_RENDERERS = {
    NotificationType.NEW_ORDER: _render_new_order,
    NotificationType.ORDER_READY: _render_order_ready,
    NotificationType.ORDER_DELIVERED: _render_order_delivered,
}


def render_notification(notification_type: NotificationType, data: NotificationData) -> Tuple[str, str]:
    """알림 종류별 (제목, HTML 본문) 반환"""
    return _RENDERERS[notification_type](data)
