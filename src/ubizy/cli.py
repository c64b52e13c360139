"""Ubizy CLI - tasks, events and habits with an assistant."""

import json
import logging
import sys
from datetime import date

import click

from .adapters.chat_api import ChatAPIService
from .assistant import ChatAssistant, GeneralAssistant
from .auth import AuthSession
from .config import Config, load_config
from .core.agenda import Agenda, urgency_level
from .core.intents import PlainReply, parse_message
from .core.models import Event, Habit, Task
from .store import ItemStore

logger = logging.getLogger(__name__)

CHAT_COMMANDS = """Commands:
  /today            items for today
  /all              every item, with urgency for upcoming ones
  /day YYYY-MM-DD   items for a calendar day
  /habits           all habits and whether they are done today
  /done N           toggle completion of item N from the last list
  /delete N         delete item N from the last list
  /categories       categories and item counts
  /profile          signed-in user
  /quit             leave (nothing is saved)
Anything else goes to the assistant."""


def _setup_logging(config: Config, verbose: bool) -> None:
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if verbose else getattr(logging, config.log_level, logging.INFO),
    )


@click.group()
@click.version_option(package_name="ubizy")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
@click.pass_context
def main(ctx, verbose: bool):
    """Ubizy - tasks, events and habits with an assistant."""
    config = load_config()
    _setup_logging(config, verbose)
    ctx.obj = config


# ============== Formatting ==============


def format_task(task: Task, today: date, config: Config, with_urgency: bool = False) -> str:
    mark = "x" if task.completed else " "
    fmt = "%H:%M" if task.due_date.date() == today else "%Y-%m-%d %H:%M"
    when = task.due_date.strftime(fmt)
    line = f"[{mark}] {task.title} ({when})"
    if with_urgency and task.due_date.date() > today:
        line += f" <{urgency_level(task.due_date, today, config.urgent_days, config.soon_days)}>"
    if task.category:
        line += f" #{task.category}"
    return line


def format_event(event: Event, today: date, config: Config, with_urgency: bool = False) -> str:
    mark = "x" if event.completed else " "
    start = event.start_date.strftime("%Y-%m-%d %H:%M")
    end = event.end_date.strftime("%H:%M" if event.end_date.date() == event.start_date.date() else "%Y-%m-%d %H:%M")
    line = f"[{mark}] {event.title} ({start} - {end})"
    if with_urgency and event.start_date.date() > today:
        line += f" <{urgency_level(event.start_date, today, config.urgent_days, config.soon_days)}>"
    if event.category:
        line += f" #{event.category}"
    return line


def format_habit(habit: Habit, today: date) -> str:
    mark = "x" if habit.completed_on(today) else " "
    line = f"[{mark}] {habit.title} ({habit.frequency_label})"
    if habit.category:
        line += f" #{habit.category}"
    return line


def render_agenda(
    agenda: Agenda,
    today: date,
    config: Config,
    with_urgency: bool = False,
) -> tuple[list[str], list[Task | Event | Habit]]:
    """Numbered lines for an agenda, plus the items in the same order."""
    lines: list[str] = []
    items: list[Task | Event | Habit] = []

    sections = [
        ("Tasks", agenda.tasks, lambda t: format_task(t, today, config, with_urgency)),
        ("Events", agenda.events, lambda e: format_event(e, today, config, with_urgency)),
        ("Habits", agenda.habits, lambda h: format_habit(h, today)),
    ]
    for heading, section, fmt in sections:
        if not section:
            continue
        lines.append(f"{heading}:")
        for item in section:
            items.append(item)
            lines.append(f"  {len(items):>2}. {fmt(item)}")

    if not items:
        lines.append("Nothing here.")
    return lines, items


# ============== Chat session ==============


class ChatSession:
    """One interactive session: a fresh store, an assistant and a user."""

    def __init__(self, config: Config, store: ItemStore | None = None, auth: AuthSession | None = None):
        self.config = config
        self.store = store or ItemStore(unknown_frequency_due=config.unknown_frequency_due)
        self.assistant = ChatAssistant(self.store, config)
        self.auth = auth or AuthSession()
        self.listed: list[Task | Event | Habit] = []

    def show(self, agenda: Agenda, with_urgency: bool = False) -> None:
        lines, self.listed = render_agenda(agenda, self.store.now().date(), self.config, with_urgency)
        for line in lines:
            click.echo(line)

    def _pick(self, arg: str) -> Task | Event | Habit | None:
        try:
            index = int(arg)
        except ValueError:
            click.echo("Give the item number from the last list.")
            return None
        if not 1 <= index <= len(self.listed):
            click.echo(f"No item {index} in the last list.")
            return None
        return self.listed[index - 1]

    def toggle(self, arg: str) -> None:
        item = self._pick(arg)
        if item is None:
            return
        if isinstance(item, Task):
            current = self.store.get_task(item.id)
            if current is None:
                return
            if current.completed:
                self.store.uncomplete_task(item.id)
            else:
                self.store.complete_task(item.id)
        elif isinstance(item, Event):
            current = self.store.get_event(item.id)
            if current is None:
                return
            if current.completed:
                self.store.uncomplete_event(item.id)
            else:
                self.store.complete_event(item.id)
        else:
            current = self.store.get_habit(item.id)
            if current is None:
                return
            now = self.store.now()
            if current.completed_on(now.date()):
                self.store.uncomplete_habit(item.id)
            else:
                self.store.complete_habit(item.id, now)
        click.echo(f"Toggled {item.title!r}.")

    def delete(self, arg: str) -> None:
        item = self._pick(arg)
        if item is None:
            return
        if isinstance(item, Task):
            self.store.delete_task(item.id)
        elif isinstance(item, Event):
            self.store.delete_event(item.id)
        else:
            self.store.delete_habit(item.id)
        click.echo(f"Deleted {item.title!r}.")

    def show_categories(self) -> None:
        categories = self.store.categories()
        if not categories:
            click.echo("No categories yet.")
            return
        for category in categories:
            stats = self.store.category_stats(category)
            click.echo(f"{category}: {stats.tasks} tasks, {stats.events} events, {stats.habits} habits")

    def show_profile(self) -> None:
        if not self.auth.is_authenticated:
            click.echo("Not signed in.")
            return
        click.echo(f"{self.auth.user.name} <{self.auth.user.email}>")
        self.show_categories()

    def command(self, line: str) -> bool:
        """Run a slash command. Returns False when the session should end."""
        name, _, arg = line.partition(" ")
        arg = arg.strip()
        match name.lower():
            case "/quit" | "/exit":
                return False
            case "/today":
                self.show(self.store.get_today_items())
            case "/all":
                self.show(self.store.get_all_items(), with_urgency=True)
            case "/day":
                try:
                    day = date.fromisoformat(arg)
                except ValueError:
                    click.echo("Usage: /day YYYY-MM-DD")
                else:
                    self.show(self.store.get_items_for_day(day))
            case "/habits":
                self.show(Agenda(habits=self.store.habits()))
            case "/done":
                self.toggle(arg)
            case "/delete":
                self.delete(arg)
            case "/categories":
                self.show_categories()
            case "/profile":
                self.show_profile()
            case _:
                click.echo(CHAT_COMMANDS)
        return True

    def message(self, text: str) -> None:
        reply = self.assistant.respond(text)
        if reply is None:
            return
        click.echo(reply.content)
        if reply.suggestion is not None:
            if click.confirm(f"Create {reply.suggestion.type}?", default=True):
                click.echo(self.assistant.confirm(reply.suggestion).content)

    def run(self) -> None:
        click.echo(self.assistant.welcome().content)
        click.echo("Type /help for commands.")
        while True:
            try:
                line = click.prompt(">", default="", show_default=False).strip()
                if not line:
                    continue
                if line.startswith("/"):
                    if not self.command(line):
                        break
                else:
                    self.message(line)
            except click.Abort:
                break
        click.echo("Bye.")


@main.command()
@click.option("--email", default=None, help="Sign in as this email (not verified)")
@click.option("--name", default=None, help="Sign up with this name")
@click.pass_obj
def chat(config: Config, email: str | None, name: str | None):
    """Interactive session with the assistant. Nothing is saved."""
    session = ChatSession(config)
    if email:
        if name:
            session.auth.signup(name, email, "")
        else:
            session.auth.login(email, "")
    session.run()


@main.command()
@click.argument("text")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def parse(text: str, as_json: bool):
    """Show what the assistant extracts from TEXT."""
    intent = parse_message(text, date.today())

    if as_json:
        click.echo(json.dumps(intent.to_dict(), indent=2))
        return

    if isinstance(intent, PlainReply):
        click.echo(intent.text)
        return

    for key, value in intent.to_dict().items():
        if value is not None:
            click.echo(f"{key}: {value}")


@main.command()
@click.argument("text")
@click.pass_obj
def ask(config: Config, text: str):
    """Ask the general assistant (external chat service)."""
    if not config.chat_api_key:
        click.echo("Error: no API key. Set CHAT_API_KEY in ubizy.conf or OPENAI_API_KEY.", err=True)
        sys.exit(1)

    assistant = GeneralAssistant(ChatAPIService(config), config)
    for chunk in assistant.stream(text):
        click.echo(chunk, nl=False)
    click.echo()


if __name__ == "__main__":
    main()
