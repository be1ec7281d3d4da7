"""Built-in service menu.

The menu is declarative data compiled by ``core.catalog.build_catalog``. A
``catalog`` section in config.json replaces it wholesale.
"""

from __future__ import annotations

from core.catalog import ReplyCatalog, build_catalog

_BACK_TO_MENU = {"id": "menu_main", "label": "🔙 Back to menu"}
_HOME = {"id": "menu_main", "label": "🏠 Main menu"}
_BACK_TO_SERVICES = {"id": "services", "label": "🔙 Back"}
_BACK_TO_PRICES = {"id": "prices", "label": "🔙 Back"}
_PRICES = {"id": "prices", "label": "💰 Prices"}


def _subscribed(plan: str) -> dict:
    return {
        "triggers": [f"subscribe_{plan}"],
        "presentation": "buttons",
        "body": (
            "🎉 *Plan selected!*\n\n"
            f"Plan: {plan}\n\n"
            "We will contact you within 24 hours to complete your subscription."
        ),
        "options": [_HOME, {"id": "support", "label": "📞 Contact us"}],
    }


DEFAULT_MENU: dict = {
    "default": {
        "presentation": "buttons",
        "body": "👋 *Hello!*\n\nI am the service bot. How can I help you?",
        "options": [
            {"id": "menu_main", "label": "📋 Main menu"},
            {"id": "services", "label": "🛍️ Our services"},
            {"id": "support", "label": "📞 Support"},
        ],
    },
    "entries": [
        {
            "triggers": ["menu_main", "menu", "مرحبا", "اهلا"],
            "presentation": "buttons",
            "body": "👋 *Welcome!*\nChoose the service you want:",
            "options": [
                {"id": "services", "label": "🛍️ Services"},
                _PRICES,
                {"id": "support", "label": "📞 Support"},
                {"id": "info", "label": "ℹ️ About us"},
            ],
        },
        {
            "triggers": ["services", "خدمات"],
            "presentation": "buttons",
            "body": "🛍️ *Our services:*\nPick a service for details:",
            "options": [
                {"id": "service_bot", "label": "🤖 Chat bot"},
                {"id": "service_web", "label": "🌐 Website"},
                {"id": "service_app", "label": "📱 Mobile app"},
                _BACK_TO_MENU,
            ],
        },
        {
            "triggers": ["prices", "اسعار", "سعر"],
            "presentation": "list",
            "body": "💰 *Pricing plans:*\nPick the plan that suits you:",
            "title": "Choose an option",
            "section_title": "Available plans",
            "options": [
                {"id": "price_basic", "label": "Basic plan", "description": "50/month - basic bot"},
                {"id": "price_pro", "label": "Pro plan", "description": "100/month - bot + website"},
                {
                    "id": "price_enterprise",
                    "label": "Enterprise plan",
                    "description": "200/month - everything + 24/7 support",
                },
                {"id": "price_custom", "label": "Custom plan", "description": "Contact us for details"},
            ],
        },
        {
            "triggers": ["price_basic"],
            "presentation": "buttons",
            "body": (
                "✨ *Basic plan - 50/month*\n\n"
                "• Basic chat bot\n• Automatic replies\n• Daily reports\n• Email support\n\n"
                "Would you like to subscribe?"
            ),
            "options": [{"id": "subscribe_basic", "label": "✅ Subscribe"}, _BACK_TO_PRICES],
        },
        {
            "triggers": ["price_pro"],
            "presentation": "buttons",
            "body": (
                "⭐ *Pro plan - 100/month*\n\n"
                "• Everything in Basic\n• Simple website\n• Fully customised bot\n"
                "• Advanced reports\n• Chat support\n\n"
                "Would you like to subscribe?"
            ),
            "options": [{"id": "subscribe_pro", "label": "✅ Subscribe"}, _BACK_TO_PRICES],
        },
        {
            "triggers": ["price_enterprise"],
            "presentation": "buttons",
            "body": (
                "🏆 *Enterprise plan - 200/month*\n\n"
                "• Everything in Pro\n• Mobile app\n• Full API\n• 24/7 support\n• Free hosting\n\n"
                "Would you like to subscribe?"
            ),
            "options": [{"id": "subscribe_enterprise", "label": "✅ Subscribe"}, _BACK_TO_PRICES],
        },
        {
            "triggers": ["price_custom"],
            "presentation": "buttons",
            "body": "🧩 *Custom plan*\n\nTell us what you need and we will prepare an offer.",
            "options": [{"id": "support", "label": "📞 Contact us"}, _BACK_TO_PRICES],
        },
        _subscribed("basic"),
        _subscribed("pro"),
        _subscribed("enterprise"),
        {
            "triggers": ["support", "دعم"],
            "presentation": "buttons",
            "body": "📞 *Support*\n\nHow can we help you?",
            "options": [
                {"id": "support_chat", "label": "💬 Live chat"},
                {"id": "support_call", "label": "📞 Call"},
                {"id": "support_email", "label": "📧 Email"},
                {"id": "menu_main", "label": "🔙 Back"},
            ],
        },
        {
            "triggers": ["support_chat"],
            "presentation": "buttons",
            "body": (
                "💬 *Live chat*\n\n"
                "The support team has been notified. A specialist will contact you shortly.\n\n"
                "⏰ Support hours: 9 AM - 9 PM"
            ),
            "options": [_HOME],
        },
        {
            "triggers": ["support_call"],
            "presentation": "buttons",
            "body": (
                "📞 *Phone support*\n\n"
                "Support line: 9200XXXXX\n\n"
                "⏰ Working hours:\nSaturday - Thursday: 9 AM - 6 PM"
            ),
            "options": [_HOME],
        },
        {
            "triggers": ["support_email"],
            "presentation": "buttons",
            "body": "📧 *Email*\n\nsupport@example.com\n\nPlease include your customer number in the subject.",
            "options": [_HOME],
        },
        {
            "triggers": ["info", "معلومات"],
            "presentation": "buttons",
            "body": (
                "ℹ️ *About us*\n\n"
                "We specialise in:\n• Chat bots\n• Websites\n• Mobile apps\n\n"
                "📍 Location: Riyadh, Saudi Arabia\n🌐 Website: www.example.com"
            ),
            "options": [_BACK_TO_MENU],
        },
        {
            "triggers": ["service_bot"],
            "presentation": "buttons",
            "body": (
                "🤖 *Chat bot*\n\n"
                "A smart bot that handles:\n• Automatic replies\n• Bookings\n• Payments\n• Reports\n\n"
                "Starting at 50/month"
            ),
            "options": [_PRICES, _BACK_TO_SERVICES],
        },
        {
            "triggers": ["service_web"],
            "presentation": "buttons",
            "body": (
                "🌐 *Website*\n\n"
                "• Professional design\n• Mobile friendly\n• SEO optimised\n• Easy admin panel\n\n"
                "Starting at 500"
            ),
            "options": [_PRICES, _BACK_TO_SERVICES],
        },
        {
            "triggers": ["service_app"],
            "presentation": "buttons",
            "body": (
                "📱 *Mobile app*\n\n"
                "• iOS & Android\n• Modern design\n• High performance\n• Ongoing support\n\n"
                "Starting at 5000"
            ),
            "options": [_PRICES, _BACK_TO_SERVICES],
        },
    ],
}


def default_catalog() -> ReplyCatalog:
    return build_catalog(DEFAULT_MENU)
