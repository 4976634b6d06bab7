"""
Offline console demo: runs booking conversations without any messaging channel.

Every line typed (or scripted) goes through the same inbound handler a
webhook would use, backed by the in-memory stores. No network, no database.

Usage:
    python console_demo.py
    python console_demo.py --scenario retry
    python console_demo.py --scenario rebook --phone +15555550123
"""

import argparse
import asyncio

from booking_assistant.config import settings
from booking_assistant.tools.booking import InMemoryAppointmentStore
from booking_assistant.tools.conversations import InMemoryConversationStore
from booking_assistant.webhook import BookingWebhook

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

DEFAULT_PHONE = "+15555550100"


class ConsoleSession:
    """Plays one customer's side of the chat in the terminal."""

    # Pre-scripted scenarios for --scenario flag
    SCENARIOS: dict[str, list[str]] = {
        "booking": [
            "hi",
            "I'd like a haircut",
            "tomorrow",
            "1",
            "Dana Levi",
        ],
        "retry": [
            "hello",
            "a massage please",
            "beard trim",
            "someday",
            "friday",
            "9",
            "option 2",
            "D",
            "Dana Levi",
        ],
        "rebook": [
            "hi",
            "colour",
            "2030-06-14",
            "2:30pm",
            "Noa",
            "again please",
            "shave",
        ],
    }

    def __init__(self, phone: str = DEFAULT_PHONE) -> None:
        self.phone = phone
        self.conversations = InMemoryConversationStore()
        self.appointments = InMemoryAppointmentStore()
        self.webhook = BookingWebhook(self.conversations, self.appointments)

    def agent_say(self, text: str) -> None:
        print(f"{GREEN}{BOLD}[{settings.business.name}]{RESET} {GREEN}{text}{RESET}")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def _banner(self, title: str) -> None:
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  BOOKING ASSISTANT - {title}{RESET}")
        print(f"{BOLD}  Business: {settings.business.name}  Customer: {self.phone}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")
        print()

    def _summary(self) -> None:
        print(f"\n{BOLD}{'=' * 60}{RESET}")
        booked = self.appointments.list_appointments()
        print(f"{DIM}  Appointments booked: {len(booked)}{RESET}")
        for appt in booked:
            print(
                f"{DIM}    {appt.id} {appt.service} for {appt.customer_name} "
                f"at {appt.start_time.isoformat()} [{appt.status.value}]{RESET}"
            )
        print(f"{BOLD}{'=' * 60}{RESET}")

    def send(self, text: str) -> None:
        response = asyncio.run(self.webhook.handle({"from": self.phone, "body": text}))
        if not response.ok:
            print(f"{RED}  !! {response.error}{RESET}")
            return
        self.agent_say(response.reply_text or "")
        record = self.conversations.get(self.phone)
        if record is not None:
            self.system_log(f"State: {record.state.value}")
        if response.appointment is not None:
            self.system_log(f"{YELLOW}Booked {response.appointment.id}{RESET}")

    def run_scenario(self, scenario: str) -> None:
        """Auto-play a pre-scripted scenario for demo purposes."""
        steps = self.SCENARIOS.get(scenario)
        if not steps:
            print(f"{RED}Unknown scenario: {scenario}{RESET}")
            return

        self._banner(f"Scenario: {scenario}")
        for step in steps:
            print(f"\n{BLUE}[Customer] {RESET}{step}")
            self.send(step)
        self._summary()

    def run(self) -> None:
        self._banner("Console Demo (type 'quit' to exit)")
        while True:
            try:
                user_input = input(f"\n{BLUE}[Customer] {RESET}").strip()
            except EOFError:
                break
            if not user_input:
                continue
            if user_input.lower() in ("quit", "exit", "q"):
                print(f"\n{DIM}Session ended.{RESET}")
                break
            self.send(user_input)
        self._summary()


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline console demo")
    parser.add_argument(
        "--scenario",
        choices=sorted(ConsoleSession.SCENARIOS),
        default=None,
        help="Auto-play a pre-scripted scenario instead of interactive mode",
    )
    parser.add_argument(
        "--phone",
        default=DEFAULT_PHONE,
        help="E.164 number to chat as",
    )
    args = parser.parse_args()

    session = ConsoleSession(phone=args.phone)
    if args.scenario:
        session.run_scenario(args.scenario)
    else:
        session.run()


if __name__ == "__main__":
    main()
