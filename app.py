from flask import Flask, render_template, request, jsonify
import logging

import config
from session.assistant import Assistant, TurnInProgressError
from session.history import conversation_summaries
from storage.user_context import BRANCHES, DEFAULT_CONTEXT, ProfileError, UserContext


# -------------------------------------------------
# Setup
# -------------------------------------------------

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def capabilities():
    notices = []
    if not config.VOICE_ENABLED:
        notices.append("Voice input is disabled.")
    if not config.GEMINI_API_KEY:
        notices.append("Conversational replies run in offline mode.")

    return {
        "voice": config.VOICE_ENABLED,
        "generative": bool(config.GEMINI_API_KEY),
        "query_service": bool(config.QUERY_SERVICE_URL),
        "notices": notices,
    }


def _json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def create_app(assistant=None):
    app = Flask(
        __name__,
        template_folder=str(config.ROOT_DIR / "templates"),
        static_folder=str(config.ROOT_DIR / "static"),
    )
    app.secret_key = config.FLASK_SECRET_KEY

    assistant = assistant or Assistant.create()
    app.extensions["assistant"] = assistant

    # -------------------------------------------------
    # Routes
    # -------------------------------------------------

    @app.route("/")
    def index():
        return render_template("index.html", app_name=config.APP_NAME)

    @app.route("/api/messages", methods=["GET"])
    def get_messages():
        return jsonify({
            "messages": assistant.transcript_store.to_json(),
            "busy": assistant.busy,
        })

    @app.route("/api/chat", methods=["POST"])
    def chat():
        user_message = str(_json_body().get("message") or "").strip()
        if not user_message:
            return jsonify({"error": "Empty message"}), 400

        try:
            new_messages = assistant.submit(user_message)
        except TurnInProgressError as e:
            return jsonify({"error": str(e), "busy": True}), 409

        return jsonify({
            "messages": [m.to_dict() for m in new_messages],
            "busy": assistant.busy,
        })

    @app.route("/api/clear", methods=["POST"])
    def clear():
        try:
            assistant.clear_transcript()
        except TurnInProgressError as e:
            return jsonify({"error": str(e), "busy": True}), 409

        return jsonify({"status": "ok", "messages": assistant.transcript_store.to_json()})

    @app.route("/api/profile", methods=["GET"])
    def get_profile():
        ctx = assistant.user_context
        return jsonify({
            "profile": ctx.to_dict(),
            "complete": ctx.is_complete,
            "defaults": DEFAULT_CONTEXT.to_dict(),
            "branches": BRANCHES,
        })

    @app.route("/api/profile", methods=["POST"])
    def save_profile():
        try:
            ctx = UserContext.from_dict(_json_body())
        except ProfileError as e:
            return jsonify({"error": str(e)}), 400

        try:
            saved = assistant.save_profile(ctx)
        except TurnInProgressError as e:
            return jsonify({"error": str(e), "busy": True}), 409

        return jsonify({"status": "ok", "profile": saved.to_dict(), "complete": saved.is_complete})

    @app.route("/api/history", methods=["GET"])
    def history():
        return jsonify({"conversations": conversation_summaries(assistant.messages)})

    @app.route("/api/capabilities", methods=["GET"])
    def get_capabilities():
        return jsonify(capabilities())

    return app


if __name__ == "__main__":
    create_app().run(debug=True)
