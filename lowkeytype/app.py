from __future__ import annotations

import logging
from typing import List, Tuple

from rich.console import Console
from rich.logging import RichHandler

from .config import LEADERBOARD_SIZE, RAW_SPEED_MAX_WORDS, RAW_SPEED_MIN_WORDS, Settings, load_settings
from .context import AppContext
from .profiles import ProfileStore
from .terminal import Color, create_terminal
from .words import DIFFICULTIES
from . import rounds, ui

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

MENU: List[Tuple[str, str]] = [
    ("Endurance Mode", "endurance"),
    ("Raw Speed Mode", "raw_speed"),
    ("Leaderboard", "leaderboard"),
    ("Profile", "profile"),
    ("Exit", "exit"),
]


def setup_logging(settings: Settings) -> None:
    # the screen belongs to the game; only errors reach it, everything goes to the file
    console_handler = RichHandler(
        level=logging.ERROR,
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    handlers: List[logging.Handler] = [console_handler]

    file_error = None
    try:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(settings.log_file, encoding="utf-8")
    except OSError as exc:
        file_error = exc
    else:
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(level=settings.level, handlers=handlers, force=True)
    if file_error is not None:
        logger.warning("logging to console only, could not open %s: %s", settings.log_file, file_error)


class LowkeyType:
    def __init__(self, ctx: AppContext) -> None:
        self.ctx = ctx

    def run(self) -> int:
        ctx = self.ctx
        count = ctx.store.load()
        ctx.terminal.say(f"Loaded {count} user profiles.")
        ui.show_banner(ctx.terminal, ctx.settings.title_file)
        self.login()

        labels = [label for label, _ in MENU]
        while True:
            ui.show_menu(ctx.terminal, labels)
            choice = ui.ask_int(ctx.console, "Enter your choice", 1, len(MENU))
            action = MENU[choice - 1][1]
            if action == "exit":
                break
            getattr(self, f"action_{action}")()

        ctx.terminal.say("Saving user data and exiting. Goodbye!")
        ctx.persist()
        return 0

    def login(self) -> None:
        ctx = self.ctx
        while True:
            try:
                profile, created = ctx.store.get_or_create(ui.ask_username(ctx.console))
            except ValueError as exc:
                ctx.terminal.say(f"Invalid input: {exc}. Please try again.", Color.WARNING)
                continue
            break

        ctx.profile = profile
        if created:
            ctx.terminal.say(f"New user detected. Creating profile for {profile.name}.", Color.INFO)
            ctx.persist()
        else:
            ui.show_welcome(ctx.terminal, profile)

    def action_endurance(self) -> None:
        rounds.run_endurance(self.ctx)

    def action_raw_speed(self) -> None:
        ctx = self.ctx
        ctx.terminal.say("\n===== Raw Speed Mode =====", Color.INFO)
        ctx.terminal.say("Choose difficulty:")
        ctx.terminal.say("1. Light (easier words)\n2. Medium (average words)\n3. Hard (difficult words)")
        difficulty = DIFFICULTIES[ui.ask_int(ctx.console, "Choice", 1, len(DIFFICULTIES)) - 1]

        pool = rounds.load_pool(ctx, difficulty)
        if pool is None:
            return
        count = ui.ask_int(ctx.console, "How many words for the test?", RAW_SPEED_MIN_WORDS, RAW_SPEED_MAX_WORDS)
        rounds.run_raw_speed(ctx, pool, count)

    def action_leaderboard(self) -> None:
        ctx = self.ctx
        top, rank = ctx.store.leaderboard(ctx.user, LEADERBOARD_SIZE)
        ui.show_leaderboard(ctx.terminal, top, ctx.user, rank, LEADERBOARD_SIZE)
        ui.pause(ctx.terminal)

    def action_profile(self) -> None:
        ui.show_profile(self.ctx.terminal, self.ctx.user)
        ui.pause(self.ctx.terminal)


def build_context(settings: Settings) -> AppContext:
    console = Console(highlight=False)
    return AppContext(
        settings=settings,
        console=console,
        terminal=create_terminal(console, settings.palette),
        store=ProfileStore(settings.users_file),
    )


def main() -> int:
    settings = load_settings()
    setup_logging(settings)
    ctx = build_context(settings)
    try:
        return LowkeyType(ctx).run()
    except (KeyboardInterrupt, EOFError):
        ctx.console.print()
        logger.info("interrupted, saving profiles before exit")
        ctx.persist()
        return 0
    except Exception as exc:
        logger.exception("unhandled error")
        ctx.console.print(f"Fatal error: {exc}", markup=False, highlight=False)
        return 1
