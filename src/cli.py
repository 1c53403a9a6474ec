"""Terminal view for the order tracker.

Renders the order list and turns typed commands into the four user
intents (add, edit, delete, toggle). The view never changes orders
itself; it only calls the handlers bound by the controller.
"""
import logging
import shutil
import textwrap
from typing import Callable, List, Optional, Sequence

from models import Order
from storage import StorageError
from theme import color, TITLE_COLOR, ID_COLOR, EMPTY_COLOR, PENDING_STYLE, DONE_STYLE, BOLD

logger = logging.getLogger(__name__)

TITLE = "DieGrotte-Orders"
EMPTY_MESSAGE = "Nothing to serve? Take orders!"
MIN_WIDTH = 20

AddHandler = Callable[[str], None]
EditHandler = Callable[[int, str], None]
IdHandler = Callable[[int], None]

# --- terminal control helpers ---
# ESC[3J (scrollback), ESC[H (home), ESC[2J (screen), ESC[H (home); 3J first
def _clear_screen() -> None:
    print("\033[3J\033[H\033[2J\033[H", end="", flush=True)


def _enter_alt_screen() -> None:
    print("\033[?1049h", end="", flush=True)


def _leave_alt_screen() -> None:
    print("\033[?1049l", end="", flush=True)


def parse_id(token: str) -> Optional[int]:
    """Parse an order id as typed by the user; '3.' is accepted."""
    raw = token.strip().rstrip('.')
    # ASCII digits only; int() rejects superscripts such as '²'
    if not (raw.isascii() and raw.isdecimal()):
        return None
    return int(raw)


class TerminalView:
    def __init__(self, alt_screen: bool = True, clear: bool = True):
        self.alt_screen = alt_screen
        self.clear = clear
        self._add_handler: Optional[AddHandler] = None
        self._edit_handler: Optional[EditHandler] = None
        self._delete_handler: Optional[IdHandler] = None
        self._toggle_handler: Optional[IdHandler] = None
        # last drawn snapshot, kept only to redraw after help/errors
        self._shown: Sequence[Order] = ()

    # -------------------- handler registration --------------------
    def bind_add_order(self, handler: AddHandler) -> None:
        self._add_handler = handler

    def bind_edit_order(self, handler: EditHandler) -> None:
        self._edit_handler = handler

    def bind_delete_order(self, handler: IdHandler) -> None:
        self._delete_handler = handler

    def bind_toggle_order(self, handler: IdHandler) -> None:
        self._toggle_handler = handler

    # -------------------- rendering --------------------
    def render(self, orders: Sequence[Order]) -> None:
        """Redraw the whole list from ``orders``."""
        self._shown = tuple(orders)
        if self.clear:
            _clear_screen()
        width = max(MIN_WIDTH, shutil.get_terminal_size((80, 24)).columns)
        print(color(TITLE, TITLE_COLOR, BOLD))
        print(color('-' * min(width, 40), TITLE_COLOR))
        if not self._shown:
            print(color(EMPTY_MESSAGE, EMPTY_COLOR))
        for order in self._shown:
            for line in self.format_order(order, width):
                print(line)
        logger.debug("Rendered orders: %r", [o.to_dict() for o in self._shown])

    @staticmethod
    def format_order(order: Order, width: int) -> List[str]:
        box = '[x]' if order.complete else '[ ]'
        prefix_visible = f"{order.id}. {box} "
        prefix = color(f"{order.id}.", ID_COLOR) + f" {box} "
        style = DONE_STYLE if order.complete else PENDING_STYLE
        wrapped = textwrap.wrap(order.text, max(1, width - len(prefix_visible))) or ['']
        indent = ' ' * len(prefix_visible)
        lines = [prefix + color(wrapped[0], style)]
        lines.extend(indent + color(part, style) for part in wrapped[1:])
        return lines

    def _redraw(self) -> None:
        self.render(self._shown)

    # -------------------- main loop --------------------
    def run(self) -> int:
        """Read commands until exit. Returns a process exit status.

        Every command that changes orders is already persisted by the
        time the next prompt appears, so leaving the loop needs no save.
        """
        exit_message: Optional[str] = None
        status = 0
        if self.alt_screen:
            _enter_alt_screen()
            # the initial render happened on the normal screen
            self._redraw()
        try:
            while True:
                line = input("\n: ").strip()
                if not line:
                    continue
                if line.lower() == 'exit':
                    exit_message = "Goodbye."
                    break
                self.dispatch(line)
        except (KeyboardInterrupt, EOFError):
            exit_message = "Interrupted. Goodbye."
        except StorageError as exc:
            logger.exception("Saving orders failed")
            exit_message = f"Could not save orders: {exc}"
            status = 1
        finally:
            if self.alt_screen:
                _leave_alt_screen()
            if exit_message:
                print(exit_message)
        return status

    # -------------------- command dispatch --------------------
    def dispatch(self, line: str) -> None:
        tokens = line.split()
        if not tokens:
            return
        cmd = tokens[0].lower()
        if cmd == 'add':
            self._cmd_add(line, tokens)
        elif cmd == 'edit':
            self._cmd_edit(line, tokens)
        elif cmd in ('rm', 'delete'):
            self._cmd_delete(tokens)
        elif cmd in ('toggle', 't'):
            self._cmd_toggle(tokens)
        elif cmd == 'help':
            self._redraw()
            self._help()
        else:
            self._redraw()
            print("\nUnknown command. Type 'help' for instructions.")

    @staticmethod
    def _rest(line: str, skip: int) -> str:
        """Text after the first ``skip`` tokens, inner spacing preserved."""
        parts = line.strip().split(None, skip)
        return parts[skip].strip() if len(parts) > skip else ''

    def _cmd_add(self, line: str, tokens: List[str]) -> None:
        text = self._rest(line, 1) if len(tokens) > 1 else input("Enter order: ").strip()
        if not text:
            print("Order text required.")
            return
        if self._add_handler is not None:
            self._add_handler(text)

    def _cmd_edit(self, line: str, tokens: List[str]) -> None:
        if len(tokens) < 2:
            print("Usage: edit <id> [text...]")
            return
        oid = parse_id(tokens[1])
        if oid is None:
            print("Invalid id.")
            return
        if len(tokens) > 2:
            text = self._rest(line, 2)
        else:
            text = input(f"Enter new text for order {oid}: ").strip()
        if not text:
            print("Order text required.")
            return
        if self._edit_handler is not None:
            self._edit_handler(oid, text)

    def _single_id(self, tokens: List[str], usage: str) -> Optional[int]:
        if len(tokens) != 2:
            print(f"Usage: {usage}")
            return None
        oid = parse_id(tokens[1])
        if oid is None:
            print("Invalid id.")
        return oid

    def _cmd_delete(self, tokens: List[str]) -> None:
        oid = self._single_id(tokens, "rm <id>")
        if oid is not None and self._delete_handler is not None:
            self._delete_handler(oid)

    def _cmd_toggle(self, tokens: List[str]) -> None:
        oid = self._single_id(tokens, "toggle <id>")
        if oid is not None and self._toggle_handler is not None:
            self._toggle_handler(oid)

    def _help(self) -> None:
        print("\nCommands:")
        print("  add                 Add a new order (prompts for text)")
        print("  add <text...>       Shorthand add with inline text (e.g., add coffee)")
        print("  edit <id> [text]    Replace an order's text (prompts if omitted)")
        print("  toggle <id>, t <id> Mark an order complete / not complete")
        print("  rm <id>             Delete an order (also: delete <id>)")
        print("  help                Show this help")
        print("  exit                Exit (orders are saved after every change)")
