import pytest
import stripe

from app.core.exceptions import WebhookProcessingError
from app.services.webhook.object_mapper import StripeObjectMapper, get_field
from tests.factories import checkout_session_payload, invoice_payload, make_event

mapper = StripeObjectMapper()


def test_typed_object_is_returned_as_is():
    event = make_event("checkout.session.completed", checkout_session_payload())

    session = mapper.deserialize(event, stripe.checkout.Session)

    assert isinstance(session, stripe.checkout.Session)
    assert session is event.data.object
    assert session.get("customer") == "cus_123"


def test_raw_payload_is_rebuilt_from_its_object_name():
    event = {
        "id": "evt_raw",
        "type": "invoice.paid",
        "data": {"object": invoice_payload(amount_paid=1500)},
    }

    invoice = mapper.deserialize(event, stripe.Invoice)

    assert isinstance(invoice, stripe.Invoice)
    assert invoice.get("amount_paid") == 1500


def test_type_mismatch_names_both_types_and_event():
    event = make_event("checkout.session.completed", invoice_payload(), event_id="evt_mismatch")

    with pytest.raises(WebhookProcessingError) as exc_info:
        mapper.deserialize(event, stripe.checkout.Session)

    message = str(exc_info.value)
    assert "Session" in message
    assert "Invoice" in message
    assert "evt_mismatch" in message
    assert exc_info.value.event_id == "evt_mismatch"


def test_undecodable_payload_raises_processing_error():
    event = make_event("invoice.paid", {"id": "in_123", "customer": "cus_123"}, event_id="evt_broken")

    with pytest.raises(WebhookProcessingError) as exc_info:
        mapper.deserialize(event, stripe.Invoice)

    assert "Failed to deserialize Invoice from event evt_broken" in str(exc_info.value)
    assert exc_info.value.__cause__ is not None


def test_unsupported_object_name_raises_processing_error():
    event = {"id": "evt_charge", "data": {"object": {"id": "ch_1", "object": "charge"}}}

    with pytest.raises(WebhookProcessingError):
        mapper.deserialize(event, stripe.Invoice)


def test_event_without_data_raises_processing_error():
    with pytest.raises(WebhookProcessingError):
        mapper.deserialize({"id": "evt_empty"}, stripe.Invoice)


def test_get_field_reads_mappings_and_attributes():
    class Holder:
        type = "invoice.paid"

    assert get_field({"type": "invoice.paid"}, "type") == "invoice.paid"
    assert get_field(Holder(), "type") == "invoice.paid"
    assert get_field(Holder(), "missing") is None
