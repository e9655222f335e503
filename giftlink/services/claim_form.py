from __future__ import annotations

import re
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from giftlink.schemas.address import AddressSuggestion, ResolvedAddress
from giftlink.schemas.campaign_config import CampaignConfig
from giftlink.schemas.claim import ClaimResult, ClaimSubmission, OrderItem, OrderPayload
from giftlink.schemas.product import Product
from giftlink.services.address_lookup import AddressLookup, AddressSearchDebouncer
from giftlink.services.campaign_config import shipping_violation

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_MIN_DIGITS = 10
PHONE_MAX_DIGITS = 15

AGGREGATE_ERROR = "Please complete the required fields before submitting."
SUBMIT_FAILED_ERROR = "We couldn't submit your claim. Please try again."

TEXT_FIELDS = ("first_name", "last_name", "email", "phone", "instagram", "tiktok", "address", "custom_answer")
CHECK_FIELDS = ("consent_primary", "consent_secondary", "marketing_opt_in")


class ClaimStep(str, Enum):
    selection = "selection"
    details = "details"
    success = "success"


class InvalidTransitionError(Exception):
    pass


class ClaimRejectedError(Exception):
    pass


class ClaimValidationError(Exception):
    def __init__(self, message: str, field_errors: Mapping[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field_errors = dict(field_errors or {})


def sanitize_name(value: str) -> str:
    return re.sub(r"[^a-zA-Z\s'-]", "", value)[:40]


def sanitize_email(value: str) -> str:
    return re.sub(r"[^\w.@+-]", "", value)[:60]


def sanitize_handle(value: str) -> str:
    cleaned = re.sub(r"[^a-zA-Z0-9._]", "", value).lstrip("@")
    return f"@{cleaned}" if cleaned else ""


def sanitize_phone(value: str) -> str:
    return re.sub(r"\D", "", value)[:PHONE_MAX_DIGITS]


SANITIZERS: dict[str, Callable[[str], str]] = {
    "first_name": sanitize_name,
    "last_name": sanitize_name,
    "email": sanitize_email,
    "phone": sanitize_phone,
    "instagram": sanitize_handle,
    "tiktok": sanitize_handle,
}


def email_error(value: str) -> str | None:
    if not EMAIL_RE.match(value.strip()):
        return "Enter a valid email address."
    return None


def phone_error(value: str) -> str | None:
    digits = re.sub(r"\D", "", value)
    if not PHONE_MIN_DIGITS <= len(digits) <= PHONE_MAX_DIGITS:
        return f"Phone number must have {PHONE_MIN_DIGITS}-{PHONE_MAX_DIGITS} digits."
    return None


def _handle_error(label: str) -> Callable[[str], str | None]:
    def _check(value: str) -> str | None:
        stripped = value.strip()
        if stripped.startswith("@"):
            stripped = stripped[1:]
        if not any(char.isalnum() for char in stripped):
            return f"Enter a valid {label} handle."
        return None

    return _check


def _always(config: CampaignConfig) -> bool:
    return True


def _never(config: CampaignConfig) -> bool:
    return False


@dataclass(frozen=True)
class FieldRule:
    name: str
    shown: Callable[[CampaignConfig], bool]
    message: str
    required: Callable[[CampaignConfig], bool] | None = None
    check: Callable[[str], str | None] | None = None

    def is_shown(self, config: CampaignConfig) -> bool:
        return self.shown(config)

    def is_required(self, config: CampaignConfig) -> bool:
        predicate = self.required or self.shown
        return predicate(config)


FIELD_RULES: tuple[FieldRule, ...] = (
    FieldRule("first_name", _always, "", required=_never),
    FieldRule("last_name", _always, "", required=_never),
    FieldRule("email", _always, "Email is required.", check=email_error),
    FieldRule("address", _always, "Shipping address is required."),
    FieldRule(
        "phone",
        lambda c: c.show_phone_field,
        "Phone number is required.",
        check=phone_error,
    ),
    FieldRule(
        "instagram",
        lambda c: c.show_instagram_field,
        "Instagram handle is required.",
        check=_handle_error("Instagram"),
    ),
    FieldRule(
        "tiktok",
        lambda c: c.show_tiktok_field,
        "TikTok handle is required.",
        check=_handle_error("TikTok"),
    ),
    FieldRule(
        "custom_answer",
        lambda c: c.ask_custom_question,
        "Please answer the question.",
        required=lambda c: c.ask_custom_question and c.custom_question_required,
    ),
    FieldRule("consent_primary", lambda c: c.show_consent_checkbox, "Consent is required."),
    FieldRule(
        "consent_secondary",
        lambda c: c.show_second_consent,
        "Consent is required.",
        required=lambda c: c.show_second_consent and c.require_second_consent,
    ),
    FieldRule("marketing_opt_in", lambda c: c.email_opt_in, "", required=_never),
)

RULES_BY_NAME: dict[str, FieldRule] = {rule.name: rule for rule in FIELD_RULES}


def shown_fields(config: CampaignConfig) -> list[str]:
    return [rule.name for rule in FIELD_RULES if rule.is_shown(config)]


def field_error(config: CampaignConfig, name: str, value: Any) -> str | None:
    rule = RULES_BY_NAME.get(name)
    if rule is None or rule.check is None or not rule.is_shown(config):
        return None
    text = str(value or "")
    if not text.strip():
        return None
    return rule.check(text)


def _is_blank(value: Any) -> bool:
    if isinstance(value, bool):
        return not value
    return value is None or not str(value).strip()


def validate_submission(config: CampaignConfig, values: Mapping[str, Any]) -> dict[str, str]:
    errors: dict[str, str] = {}
    for rule in FIELD_RULES:
        if not rule.is_shown(config):
            continue
        value = values.get(rule.name)
        if rule.is_required(config) and _is_blank(value):
            errors[rule.name] = rule.message
            continue
        problem = field_error(config, rule.name, value)
        if problem:
            errors[rule.name] = problem
    return errors


def offered_products(config: CampaignConfig, catalog: Sequence[Product]) -> list[Product]:
    by_id = {product.id: product for product in catalog}
    return [by_id[pid] for pid in config.selected_product_ids if pid in by_id]


class ClaimForm:
    def __init__(
        self,
        campaign_id: int,
        config: CampaignConfig,
        catalog: Sequence[Product],
        address_lookup: AddressLookup | None = None,
        debouncer: AddressSearchDebouncer | None = None,
    ) -> None:
        self.campaign_id = campaign_id
        self.config = config
        self.catalog = list(catalog)
        self.address_lookup = address_lookup
        self.debouncer = debouncer
        if self.debouncer is None and address_lookup is not None:
            self.debouncer = AddressSearchDebouncer(address_lookup)

        self.step = ClaimStep.selection
        self.selected_ids: list[str] = []
        self.values: dict[str, str] = {name: "" for name in TEXT_FIELDS}
        self.checks: dict[str, bool] = {name: False for name in CHECK_FIELDS}
        self.shipping_details: ResolvedAddress | None = None
        self.rejected_address: ResolvedAddress | None = None
        self.address_error: str | None = None
        self.field_errors: dict[str, str] = {}
        self.form_error: str | None = None
        self.submitting = False
        self.result: ClaimResult | None = None

    @property
    def products(self) -> list[Product]:
        return offered_products(self.config, self.catalog)

    @property
    def selected_products(self) -> list[Product]:
        by_id = {product.id: product for product in self.products}
        return [by_id[pid] for pid in self.selected_ids if pid in by_id]

    @property
    def selected_total(self) -> float:
        return sum(product.price for product in self.selected_products)

    @property
    def can_submit(self) -> bool:
        return self.step is ClaimStep.details and not self.submitting

    def _require_step(self, *steps: ClaimStep) -> None:
        if self.step not in steps:
            allowed = ", ".join(step.value for step in steps)
            raise InvalidTransitionError(f"Action requires step {allowed}, form is at {self.step.value}")

    def toggle_product(self, product_id: str) -> bool:
        self._require_step(ClaimStep.selection)
        if product_id in self.selected_ids:
            self.selected_ids.remove(product_id)
            return True
        product = next((item for item in self.products if item.id == product_id), None)
        if product is None:
            return False
        if len(self.selected_ids) >= self.config.item_limit:
            return False
        cap = self.config.max_cart_value
        if cap is not None and self.selected_total + product.price > cap:
            return False
        self.selected_ids.append(product_id)
        return True

    def proceed(self) -> None:
        self._require_step(ClaimStep.selection)
        if not self.selected_ids:
            raise InvalidTransitionError("Select at least one product")
        self.step = ClaimStep.details

    def back(self) -> None:
        self._require_step(ClaimStep.details)
        if self.submitting:
            raise InvalidTransitionError("Submission in progress")
        self.step = ClaimStep.selection

    def _refresh_field_error(self, name: str) -> None:
        problem = field_error(self.config, name, self.values.get(name))
        if problem:
            self.field_errors[name] = problem
        else:
            self.field_errors.pop(name, None)

    def update_field(self, name: str, value: str) -> str:
        if name not in self.values:
            raise KeyError(name)
        sanitizer = SANITIZERS.get(name)
        cleaned = sanitizer(value) if sanitizer else value
        self.values[name] = cleaned
        if name == "address" and self.shipping_details is not None:
            if cleaned != self.shipping_details.label:
                self.shipping_details = None
        self._refresh_field_error(name)
        return cleaned

    def blur(self, name: str) -> str | None:
        self._refresh_field_error(name)
        return self.field_errors.get(name)

    def set_check(self, name: str, checked: bool) -> None:
        if name not in self.checks:
            raise KeyError(name)
        self.checks[name] = bool(checked)
        if checked:
            self.field_errors.pop(name, None)

    async def search_address(self, query: str) -> list[AddressSuggestion] | None:
        if self.debouncer is None:
            return []
        return await self.debouncer.search(query)

    def _apply_address(self, address: ResolvedAddress) -> bool:
        problem = shipping_violation(self.config, address.country)
        if problem:
            self.shipping_details = None
            self.rejected_address = address
            self.address_error = problem
            return False
        self.shipping_details = address
        self.rejected_address = None
        self.address_error = None
        self.values["address"] = address.label
        self.field_errors.pop("address", None)
        return True

    async def select_address(self, suggestion_id: str) -> ResolvedAddress | None:
        if self.address_lookup is None:
            raise InvalidTransitionError("Address lookup is not available")
        address = await self.address_lookup.get_place_details(suggestion_id)
        if self._apply_address(address):
            return address
        return None

    def apply_config(self, config: CampaignConfig) -> None:
        self.config = config
        self.selected_ids = [pid for pid in self.selected_ids if pid in config.selected_product_ids]
        if self.rejected_address is not None:
            self._apply_address(self.rejected_address)
        elif self.shipping_details is not None:
            self._apply_address(self.shipping_details)

    def form_values(self) -> dict[str, Any]:
        return {**self.values, **self.checks}

    def validate_for_submit(self) -> dict[str, str]:
        errors = validate_submission(self.config, self.form_values())
        if self.address_error:
            errors.setdefault("address", self.address_error)
        if errors:
            self.field_errors.update(errors)
            self.form_error = AGGREGATE_ERROR
        else:
            self.form_error = None
        return errors

    def build_submission(self) -> OrderPayload:
        config = self.config
        shown = set(shown_fields(config))
        values = self.values

        def _optional(name: str) -> str | None:
            if name not in shown:
                return None
            return values[name].strip() or None

        return OrderPayload(
            campaign_id=self.campaign_id,
            first_name=values["first_name"].strip(),
            last_name=values["last_name"].strip(),
            email=values["email"].strip(),
            phone=_optional("phone"),
            instagram=_optional("instagram"),
            tiktok=_optional("tiktok"),
            address=values["address"].strip(),
            shipping_details=self.shipping_details,
            items=[OrderItem(**product.model_dump()) for product in self.selected_products],
            custom_answer=_optional("custom_answer"),
            consent_primary=self.checks["consent_primary"] if "consent_primary" in shown else False,
            consent_secondary=self.checks["consent_secondary"] if "consent_secondary" in shown else False,
            marketing_opt_in=self.checks["marketing_opt_in"] if "marketing_opt_in" in shown else False,
        )

    async def submit(self, handler: Callable[[OrderPayload], Awaitable[ClaimResult]]) -> ClaimResult:
        self._require_step(ClaimStep.details)
        if self.submitting:
            raise InvalidTransitionError("Submission already in progress")
        errors = self.validate_for_submit()
        if errors:
            raise ClaimValidationError(AGGREGATE_ERROR, errors)

        self.submitting = True
        try:
            result = await handler(self.build_submission())
        except ClaimValidationError as exc:
            self.field_errors.update(exc.field_errors)
            self.form_error = exc.message
            raise
        except ClaimRejectedError as exc:
            self.form_error = str(exc)
            raise
        except Exception:
            self.form_error = SUBMIT_FAILED_ERROR
            raise
        finally:
            self.submitting = False

        self.result = result
        self.form_error = None
        self.step = ClaimStep.success
        return result

    @classmethod
    def from_submission(
        cls,
        campaign_id: int,
        config: CampaignConfig,
        catalog: Sequence[Product],
        submission: ClaimSubmission,
        address_lookup: AddressLookup | None = None,
    ) -> ClaimForm:
        form = cls(campaign_id, config, catalog, address_lookup=address_lookup)
        for product_id in submission.product_ids:
            if product_id not in form.selected_ids:
                form.toggle_product(product_id)
        form.proceed()
        for name in TEXT_FIELDS:
            form.update_field(name, getattr(submission, name))
        for name in CHECK_FIELDS:
            form.set_check(name, getattr(submission, name))
        return form
