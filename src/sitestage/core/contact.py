"""Contact form submission.

Submits contact requests to the CMS contact endpoint and tracks the form
state shown to the visitor. Failures are recovered locally: the form keeps
its values and shows the error, with no automatic retry.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, fields

import httpx

from sitestage.core.templating import render_template

logger = logging.getLogger(__name__)

CONTACT_ENDPOINT = "/api/contact-us"
CONTACT_SUBJECT = "Contact Form Submission"


@dataclass
class ContactFormData:
    """Visitor-entered contact form values."""

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    company: str = ""
    message: str = ""

    @classmethod
    def from_form(cls, form: Mapping[str, str]) -> "ContactFormData":
        """Build form data from submitted field names (firstName, ...)."""
        return cls(
            first_name=form.get("firstName", ""),
            last_name=form.get("lastName", ""),
            email=form.get("email", ""),
            company=form.get("company", ""),
            message=form.get("message", ""),
        )


@dataclass
class ContactFormState:
    """Submission state; at most one of submitting/success/error is set."""

    is_submitting: bool = False
    is_success: bool = False
    is_error: bool = False
    error_message: str = ""


class ContactForm:
    """Contact form bound to a CMS API base URL."""

    def __init__(self, api_url: str | None, data: ContactFormData | None = None) -> None:
        """Initialize form.

        Args:
            api_url: CMS base URL (e.g., https://cms.example.com)
            data: Initial field values
        """
        self.api_url = api_url.rstrip("/") if api_url else None
        self.data = data or ContactFormData()
        self.state = ContactFormState()

    @property
    def endpoint(self) -> str | None:
        """Full submission URL, or None when no API URL is configured."""
        if not self.api_url:
            return None
        return f"{self.api_url}{CONTACT_ENDPOINT}"

    async def submit(
        self,
        client: httpx.AsyncClient | None = None,
        language: str = "en",
    ) -> ContactFormState:
        """Submit the form to the CMS.

        Args:
            client: HTTP client to use (a short-lived one is created if None)
            language: Visitor locale sent along with the request

        Returns:
            The resulting form state
        """
        self.state = ContactFormState(is_submitting=True)

        try:
            endpoint = self.endpoint
            if endpoint is None:
                raise ValueError("API URL not configured. Please check environment variables.")

            if client is None:
                async with httpx.AsyncClient(timeout=30) as owned_client:
                    response = await self._post(owned_client, endpoint, language)
            else:
                response = await self._post(client, endpoint, language)

            if not response.is_success:
                raise ValueError(f"Server responded with {response.status_code}")
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Contact form submission failed: {e}")
            self.state = ContactFormState(
                is_error=True,
                error_message=str(e) or "An unknown error occurred",
            )
            return self.state

        logger.info(f"Contact form submitted for {self.data.email}")
        self.state = ContactFormState(is_success=True)
        self.data = ContactFormData()
        return self.state

    def reset(self) -> None:
        """Leave the success state to send another message."""
        self.state = ContactFormState()

    async def _post(
        self,
        client: httpx.AsyncClient,
        endpoint: str,
        language: str,
    ) -> httpx.Response:
        payload = {
            "firstName": self.data.first_name,
            "lastName": self.data.last_name,
            "company": self.data.company,
            "subject": CONTACT_SUBJECT,
            "message": self.data.message,
            "email": self.data.email,
            "language": language,
        }
        logger.debug(f"Posting contact form to {endpoint}")
        return await client.post(
            endpoint,
            data=payload,
            files={"file": ("", b"")},
        )


def render_contact_form(
    form: ContactForm | None = None,
    *,
    action: str | None = None,
    language: str = "en",
) -> str:
    """Render the contact form in its current state.

    Args:
        form: Form whose values and state are shown (empty form if None)
        action: Form action URL (defaults to the CMS endpoint)
        language: Locale sent with static submissions

    Returns:
        HTML fragment
    """
    form = form or ContactForm(None)
    return render_template(
        "components/contact_form.html",
        data={f.name: getattr(form.data, f.name) for f in fields(form.data)},
        state=form.state,
        action=action or form.endpoint or "",
        subject=CONTACT_SUBJECT,
        language=language,
    )
