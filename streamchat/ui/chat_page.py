"""NiceGUI chat interface driven by the conversation orchestrator."""

from nicegui import Client, ui

from streamchat.models.schemas import Message, MessageRole, StreamStatus
from streamchat.sessions.orchestrator import ConversationOrchestrator, OrchestratorEvent
from streamchat.settings import get_server_settings

SUGGESTIONS = [
    "What can you help me with?",
    "Explain quantum computing in simple terms",
    "Help me write a Python function",
    "Give me creative writing ideas",
]

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: #f5f5f5; min-height: 100vh; }

    .sidebar { background: #fafafa; border-right: 1px solid #e5e7eb; }
    .session-item { border-radius: 8px; cursor: pointer; }
    .session-item:hover { background: #f0f0f0; }
    .session-active { background: #e8e8f8; }

    .header { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); }

    .message-user {
        background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
        color: white;
        border-radius: 18px 18px 4px 18px;
        white-space: pre-wrap;
    }

    .message-assistant {
        background: #f3f4f6;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
        white-space: pre-wrap;
    }

    .avatar-user { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); }
    .avatar-assistant { background: #6b7280; }

    .typing-dot {
        width: 8px; height: 8px;
        background: #667eea;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .input-box {
        background: #f9fafb;
        border: 1px solid #e5e7eb;
        border-radius: 12px;
    }
    .input-box:focus-within { border-color: #667eea; }
</style>
"""


@ui.page("/")
def chat_page(client: Client) -> None:
    """Main chat page. Sessions live as long as the browser tab."""
    ui.add_head_html(CUSTOM_CSS)
    orchestrator = ConversationOrchestrator()
    client.on_disconnect(orchestrator.cancel_all)

    input_field: ui.textarea
    send_btn: ui.button
    stop_btn: ui.button

    def render_avatar(is_user: bool) -> None:
        css = "avatar-user" if is_user else "avatar-assistant"
        icon = "person" if is_user else "smart_toy"
        avatar_classes = f"w-9 h-9 rounded-full flex items-center justify-center {css}"
        with ui.element("div").classes(avatar_classes):
            ui.icon(icon).classes("text-white text-lg")

    def render_message(msg: Message) -> None:
        is_user = msg.role is MessageRole.USER
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"

        with ui.row().classes(f"w-full {align} gap-3 items-end"):
            if not is_user:
                render_avatar(False)
            with ui.column().classes("max-w-[70%] gap-1"):
                with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                    ui.label(msg.content).classes("text-sm leading-relaxed")
                ui.label(msg.created_at.strftime("%I:%M %p")).classes(
                    f"text-[10px] text-gray-400 {'self-end' if is_user else 'self-start'}"
                )
            if is_user:
                render_avatar(True)

    def render_in_progress(text: str) -> None:
        with ui.row().classes("w-full justify-start gap-3 items-end"):
            render_avatar(False)
            with ui.element("div").classes("message-assistant px-4 py-3"):
                if text:
                    ui.label(text).classes("text-sm leading-relaxed")
                else:
                    with ui.row().classes("items-center gap-2"):
                        with ui.row().classes("gap-1"):
                            for _ in range(3):
                                ui.element("div").classes("typing-dot")
                        ui.label("Thinking...").classes("text-sm text-gray-500 italic")

    def use_suggestion(text: str) -> None:
        input_field.value = text

    @ui.refreshable
    def sidebar() -> None:
        view = orchestrator.view
        for session in view.sessions:
            active = " session-active" if session.id == view.active_session_id else ""
            with (
                ui.row()
                .classes(f"w-full items-center gap-2 px-3 py-2 session-item{active}")
                .on("click", lambda _, sid=session.id: orchestrator.select_session(sid))
            ):
                ui.icon("chat_bubble_outline").classes("text-gray-500")
                ui.label(session.title).classes("text-sm flex-1 truncate")
                ui.button(icon="delete").props("flat round dense size=sm").on(
                    "click.stop", lambda _, sid=session.id: orchestrator.delete_session(sid)
                )

    @ui.refreshable
    def messages() -> None:
        view = orchestrator.view
        active = orchestrator.store.active_session
        if active is None or not active.messages:
            with ui.column().classes("w-full items-center justify-center gap-4 py-16"):
                ui.icon("auto_awesome").classes("text-5xl text-indigo-400")
                ui.label("How can I help you today?").classes("text-2xl font-semibold")
                with ui.grid(columns=2).classes("gap-3"):
                    for suggestion in SUGGESTIONS:
                        ui.button(
                            suggestion,
                            on_click=lambda _, s=suggestion: use_suggestion(s),
                        ).props("outline no-caps")
            return

        for msg in active.messages:
            render_message(msg)
        if view.is_busy:
            render_in_progress(view.in_progress_text)

    def sync_controls() -> None:
        busy = orchestrator.view.is_busy
        send_btn.set_enabled(not busy)
        stop_btn.set_visibility(busy)

    def on_event(event: OrchestratorEvent) -> None:
        if event is not OrchestratorEvent.STREAM_UPDATED:
            sidebar.refresh()
        messages.refresh()
        sync_controls()

    orchestrator.subscribe(on_event)

    async def send_message() -> None:
        text = input_field.value or ""
        if not text.strip() or orchestrator.view.is_busy:
            return

        input_field.value = ""
        result = await orchestrator.send_message(text)
        if result is not None and result.status is StreamStatus.ERRORED:
            ui.notify(result.error or "Request failed", type="negative")

    def new_chat() -> None:
        orchestrator.new_session()
        input_field.value = ""

    # === UI Layout ===
    with ui.row().classes("w-full h-screen gap-0 no-wrap"):
        with ui.column().classes("w-64 h-full sidebar p-3 gap-2") as sidebar_panel:
            ui.button("New Chat", icon="add", on_click=new_chat).props(
                "outline no-caps"
            ).classes("w-full")
            with ui.scroll_area().classes("flex-grow w-full"):
                sidebar()
            ui.label("streamchat").classes("text-xs text-gray-400 self-center")

        with ui.column().classes("flex-1 h-full gap-0"):
            with ui.row().classes("w-full header px-5 py-3 items-center gap-3"):
                ui.button(
                    icon="menu",
                    on_click=lambda: sidebar_panel.set_visibility(not sidebar_panel.visible),
                ).props(
                    "flat round color=white"
                )
                ui.icon("auto_awesome").classes("text-white text-2xl")
                ui.label("Chat").classes("text-lg font-semibold text-white")

            with (
                ui.scroll_area().classes("flex-grow w-full bg-white"),
                ui.column().classes("w-full max-w-3xl mx-auto p-5 gap-4"),
            ):
                messages()

            with ui.row().classes("w-full max-w-3xl mx-auto p-4 gap-3 items-end"):
                with ui.element("div").classes("flex-grow input-box px-3 py-2"):
                    input_field = (
                        ui.textarea(placeholder="Message...")
                        .props("autogrow borderless dense rows=1")
                        .classes("w-full")
                        .on("keydown.enter.prevent", send_message)
                    )
                send_btn = ui.button(icon="send", on_click=send_message).props(
                    "round unelevated color=primary"
                )
                stop_btn = ui.button(icon="stop", on_click=orchestrator.cancel_current).props(
                    "round unelevated color=negative"
                )
            ui.label("Replies can make mistakes. Check important info.").classes(
                "text-xs text-gray-400 self-center pb-2"
            )

    sync_controls()


def main() -> None:
    settings = get_server_settings()
    ui.run(title="streamchat", host=settings.host, port=settings.ui_port, reload=False)


if __name__ == "__main__":
    main()
