# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets. Use .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "BOARD_APP_NAME": "App display name (default: action-board).",
    "BOARD_LOG_LEVEL": "Console logging level (default: INFO).",
    # Paths (gitignored)
    "BOARD_DATA_DIR": "Local data directory for the store and logs (default: .local/action_board).",
    "BOARD_STORE_PATH": "Key-value SQLite path (default: <data_dir>/board.sqlite3).",
    # LLM / OpenRouter
    "BOARD_OPENROUTER_API_KEY": "OpenRouter API key (without it the board uses the offline prioritizer).",
    "BOARD_OPENROUTER_BASE_URL": "OpenRouter base URL (default: https://openrouter.ai/api/v1).",
    "BOARD_LLM_MODELS": "Comma/space separated list of models to try in order.",
    "BOARD_HTTP_REFERER": "Optional OpenRouter metadata header.",
    "BOARD_APP_TITLE": "Optional OpenRouter metadata header title.",
    "BOARD_LLM_CONNECT_TIMEOUT_SECONDS": "Connect timeout per model (default: 5).",
    "BOARD_LLM_READ_TIMEOUT_SECONDS": "Read timeout per model (default: 25).",
    "BOARD_LLM_FIRST_TOKEN_TIMEOUT_SECONDS": "Give up on a model without a first token after this (default: 20).",
    "BOARD_PRIORITIZE_TIMEOUT_SECONDS": "Overall limit for one prioritization request (default: 60).",
    # Audio
    "BOARD_SOUND_ENABLED": "Play sound effects (true/false, needs the 'audio' extra).",
    "BOARD_SOUND_VOLUME": "Sound volume 0..1 (default: 0.3).",
}
