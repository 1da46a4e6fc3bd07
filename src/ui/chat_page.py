"""NiceGUI chat interface with SSE streaming support."""

from nicegui import ui

from src.client.session import API_BASE_URL, ChatSession
from src.models.schemas import ChatMessage

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: #f5f5f5; min-height: 100vh; }

    .app-container {
        background: white;
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        overflow: hidden;
    }

    .header { background: #111827; }

    .message-user {
        background: #4f46e5;
        color: white;
        border-radius: 12px;
    }

    .message-assistant {
        background: #f3f4f6;
        color: #374151;
        border-radius: 12px;
    }

    .typing-dot {
        width: 8px; height: 8px;
        background: #4f46e5;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }
</style>
"""


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)

    messages_container: ui.column
    input_field: ui.input
    send_btn: ui.button

    def render_message(msg: ChatMessage) -> None:
        is_user = msg.role == "user"
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"

        with ui.row().classes(f"w-full {align}"):
            with ui.element("div").classes(f"max-w-[80%] px-4 py-2 {bubble}"):
                ui.label(msg.content).classes("whitespace-pre-wrap break-words text-sm")

    def render_typing_indicator() -> None:
        with ui.row().classes("w-full justify-start"):
            with ui.element("div").classes("message-assistant px-4 py-3"):
                with ui.row().classes("gap-1"):
                    for _ in range(3):
                        ui.element("div").classes("typing-dot")

    def refresh_messages() -> None:
        messages_container.clear()
        with messages_container:
            if not session.messages:
                with ui.column().classes("w-full h-64 items-center justify-center gap-2"):
                    ui.label("AI Wallet Manager").classes("text-2xl font-semibold")
                    ui.label(
                        "Ask me anything about your wallet, transactions, or Web3 operations."
                    ).classes("text-gray-400")
            else:
                for msg in session.messages:
                    render_message(msg)
                if session.is_loading:
                    render_typing_indicator()
        send_btn.set_enabled(not session.is_loading)
        input_field.set_enabled(not session.is_loading)

    session = ChatSession(api_base_url=API_BASE_URL, on_update=refresh_messages)
    ui.context.client.on_disconnect(session.close)

    async def send_message() -> None:
        text = input_field.value or ""
        if not text.strip() or session.is_loading:
            return
        input_field.value = ""
        await session.send_message(text)

    def new_chat() -> None:
        session.reset()

    # === UI Layout ===
    with (
        ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
        ui.column().classes("w-full max-w-3xl mx-auto app-container").style(
            "height: calc(100vh - 4rem)"
        ),
    ):
        # Header
        with ui.row().classes("w-full header px-5 py-4 items-center justify-between"):
            with ui.row().classes("items-center gap-3"):
                ui.icon("account_balance_wallet").classes("text-white text-3xl")
                ui.label("AI Wallet Manager").classes("text-lg font-semibold text-white")
            with ui.row().classes("items-center gap-3"):
                ui.label().bind_text_from(
                    session, "session_id", lambda s: str(s)[:8].upper() if s else "NEW"
                ).classes("text-xs text-white/80 font-mono")
                ui.button(icon="add", on_click=new_chat).props("flat round color=white")

        # Messages
        with (
            ui.scroll_area().classes("flex-grow w-full bg-gray-50"),
            ui.column().classes("w-full p-5"),
        ):
            messages_container = ui.column().classes("w-full gap-4")

        # Input
        with ui.row().classes("w-full p-4 gap-3 items-center bg-white border-t"):
            input_field = (
                ui.input(placeholder="Ask about your wallet...")
                .props("outlined dense")
                .classes("flex-grow")
                .on("keydown.enter", send_message)
            )
            send_btn = ui.button(icon="send", on_click=send_message).props(
                "round unelevated color=primary"
            )

    refresh_messages()


def main() -> None:
    ui.run(title="AI Wallet Manager", port=8080, reload=False)


if __name__ == "__main__":
    main()
