# cli_chat_host.py
"""
Command-line interface for the mentor assistant
Uses the same session as the chat widget but with text input/output
"""

import logging
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from mentor_assistant.config import Config, setup_logging
from mentor_assistant.session import MentorSession, SubmissionResult, QUICK_ACTIONS

logger = logging.getLogger(__name__)

HELP_TEXT = """Commands:
  /quick N   send quick action N
  /listen    start voice capture
  /stop      stop listening or speaking
  /history   show the conversation so far
  /help      show this help
  /quit      exit"""


class CLIInterface:
    """Command-line interface that reuses the widget session"""

    def __init__(self, session: MentorSession):
        self.session = session

    @staticmethod
    def show(result: SubmissionResult):
        print(f"\n🤖 {result.rendered}\n")

    def show_quick_actions(self):
        for i, action in enumerate(QUICK_ACTIONS):
            print(f"  [{i}] {action}")

    def handle_command(self, line: str) -> bool:
        """Returns False when the user asked to quit"""
        parts = line.split()
        command = parts[0].lower()

        if command in ("/quit", "/exit"):
            return False

        if command == "/quick":
            try:
                result = self.session.submit_quick_action(int(parts[1]))
            except (IndexError, ValueError):
                self.show_quick_actions()
                return True
            if result:
                self.show(result)

        elif command == "/listen":
            if self.session.start_listening():
                print("🎤 Listening... speak now!")
            else:
                print(f"Cannot listen right now ({self.session.speech_mode.value})")

        elif command == "/stop":
            if not (self.session.stop_listening() or self.session.stop_speaking()):
                print("Nothing to stop")

        elif command == "/history":
            for turn in self.session.history:
                print(f"[{turn.timestamp:%H:%M:%S}] {turn.speaker.value}: {turn.text}")

        else:
            print(HELP_TEXT)

        return True

    def run(self):
        history = self.session.history.snapshot()
        if history:
            print(f"\n🤖 {history[0].text}\n")
        self.show_quick_actions()
        print("Type /help for commands.\n")

        while True:
            try:
                line = input("You: ").strip()
            except (EOFError, KeyboardInterrupt):
                print()
                break

            if not line:
                continue
            if line.startswith("/"):
                if not self.handle_command(line):
                    break
                continue

            result = self.session.submit_user_text(line)
            if result:
                self.show(result)


def main():
    config = Config.from_env()
    setup_logging(config)

    with MentorSession.from_config(config, on_voice_result=CLIInterface.show) as session:
        CLIInterface(session).run()

    print("Goodbye!")


if __name__ == "__main__":
    main()
