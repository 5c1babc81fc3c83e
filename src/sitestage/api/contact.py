"""Contact form relay.

The dev server posts the rendered form here, submits it to the CMS and
answers with the re-rendered form fragment in its new state.
"""

from aiohttp import web

from sitestage.app_keys import config_key, http_client_key
from sitestage.core.contact import ContactForm, ContactFormData, render_contact_form

CONTACT_RELAY_PATH = "/api/contact"


def create_contact_routes() -> list[web.RouteDef]:
    return [
        web.post(CONTACT_RELAY_PATH, post_contact),
    ]


async def post_contact(request: web.Request) -> web.Response:
    config = request.app[config_key]
    submitted = await request.post()
    fields = {key: str(value) for key, value in submitted.items() if isinstance(value, str)}
    language = fields.get("language") or config.content.default_language

    form = ContactForm(config.cms.url, ContactFormData.from_form(fields))
    state = await form.submit(request.app[http_client_key], language=language)

    return web.Response(
        text=render_contact_form(form, action=CONTACT_RELAY_PATH, language=language),
        status=502 if state.is_error else 200,
        content_type="text/html",
    )
