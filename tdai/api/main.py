"""
Minimal interactive CLI entrypoint for TDAI.

Architectural role:
- Provides a terminal-only interface over the core engine.
- Delegates message processing to `tdai.core.engine.process_message` with a
  fixed caller key, so history and follow-ups behave as over HTTP.

Request lifecycle (per user turn, CLI):
1. Read a single line from stdin.
2. Handle local control commands (`exit`/`quit`, `empty chat`/`clear chat`).
3. Forward regular messages to the engine.
4. Print search status, the answer and its mode/search flags.

Error handling strategy:
- Handles EOF and keyboard interrupts without traceback output.
- Completion failures print a French apology and keep the loop alive.
"""

from dotenv import load_dotenv

load_dotenv()

import asyncio
import logging
import os
import sys

from tdai.core import engine
from tdai.core.engine import process_message
from tdai.llm.client import CompletionError
from tdai.memory.conversation_manager import get_default_store


CLI_CALLER_KEY = "cli"


# =========================================================
# UTF-8 SAFE STDOUT
# Configures best-effort UTF-8 console output without failing startup.
# =========================================================

if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding="utf-8", errors="ignore")


def _print_status(value: str) -> None:
    if value == engine.STATUS_SEARCH_DONE:
        print("[recherche terminée]")
    else:
        print(f"[{value}...]")


# =========================================================
# MAIN APPLICATION LOOP
# =========================================================

def main():
    """
    Run the interactive terminal session.

    Interaction with core:
    - Calls `process_message(message, CLI_CALLER_KEY, status_callback=...)`
      for non-control user inputs.
    """
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "WARNING").upper())

    memory = get_default_store()

    print("TDAI démarré. (Tape 'exit' pour quitter)\n")
    print(f"Recherche web : {engine.search_provider_name() or 'désactivée'}")
    print("-" * 60)

    while True:

        try:
            message = input("Toi : ").strip()

        except EOFError:
            print()
            break

        except KeyboardInterrupt:
            print("\nInterrompu.")
            break

        if not message:
            continue

        if message.lower() in ("exit", "quit"):
            print("À bientôt.")
            break

        if message.lower() in ("empty chat", "clear chat"):
            memory.clear(CLI_CALLER_KEY)
            print("Conversation effacée.")
            continue

        try:
            reply = asyncio.run(
                process_message(message, CLI_CALLER_KEY, memory=memory, status_callback=_print_status)
            )
        except CompletionError as err:
            logging.getLogger(__name__).error("Completion failed: %s", err)
            print("\nUne erreur technique est survenue.")
            print("\n" + "-" * 60 + "\n")
            continue

        print("\nTDAI :\n")
        print(reply.text)
        print(f"\n(mode={reply.mode_label}, recherche={'oui' if reply.used_search else 'non'}, pays={reply.country})")
        print("\n" + "-" * 60 + "\n")


if __name__ == "__main__":
    main()
