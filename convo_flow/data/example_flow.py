from convo_flow.client.interface import FlowClient
from convo_flow.domain.constants import PROCEED_SIGNAL
from convo_flow.domain.models import FlowDefinition, create_step, suspending

# ==============================================================================
# EXAMPLE SHOP FLOW
# ==============================================================================
# A small ordering conversation: pick an item, hand over a card number,
# confirm. Steps close over the client so they can read and write
# conversation state.


def _first_slot_value(client: FlowClient, entity: str):
    slot = client.get_message_part().slots.get(entity) or {}
    values = (slot.get("values_by_role") or {}).get("generic") or []
    return values[0].get("value") if values else None


def build_example_flow(client: FlowClient) -> FlowDefinition:

    # --- RETURN POLICY (reached via the "return_policy" classification) ---
    return_policy = create_step(
        satisfied=lambda: False,
        prompt=lambda: _reply_and_finish(client, "return_policy"),
    )

    # --- STEP 1: PICK AN ITEM ---
    def extract_item(message_part):
        item = _first_slot_value(client, "item")
        if item:
            client.update_conversation_state("cart", [item])

    def ask_for_item():
        client.expect("shop", ["show_items"])
        _reply_and_finish(client, "ask_item")

    present_items = create_step(
        extract_info=extract_item,
        satisfied=lambda: bool(client.get_conversation_state().get("cart")),
        prompt=ask_for_item,
        expects=lambda: ["show_items"],
    )

    # --- STEP 2: PAYMENT ---
    def extract_card(message_part):
        card_number = _first_slot_value(client, "card_number")
        if card_number:
            client.update_conversation_state({"paymentInstrument": {"cardNumber": card_number}})

    collect_payment = create_step(
        extract_info=extract_card,
        satisfied=lambda: bool(
            (client.get_conversation_state().get("paymentInstrument") or {}).get("cardNumber")
        ),
        prompt=lambda: _reply_and_finish(client, "ask_card_number"),
    )

    # --- STEP 3: CONFIRMATION ---
    # Suspending prompt: confirms, then proceeds; next() sends the order to "end"
    @suspending
    def confirm(proceed):
        client.add_response("confirm_order", {"cart": client.get_conversation_state().get("cart")})
        client.update_conversation_state("orderConfirmed", True)
        proceed(PROCEED_SIGNAL)

    confirm_order = create_step(
        satisfied=lambda: bool(client.get_conversation_state().get("orderConfirmed")),
        prompt=confirm,
        next=lambda: "end",
    )

    # --- END ---
    end = create_step(
        satisfied=lambda: False,
        prompt=lambda: _reply_and_finish(client, "goodbye"),
    )

    return FlowDefinition(
        classifications={"return_policy": "returns"},
        streams={
            "main": "shop",
            "shop": [present_items, "checkout"],
            "checkout": [collect_payment, confirm_order],
            "returns": [return_policy],
            "end": [end],
        },
        auto_responses={"greeting": {"minimumConfidence": 0.8}},
    )


def _reply_and_finish(client: FlowClient, response_name: str):
    client.add_response(response_name)
    client.done()
