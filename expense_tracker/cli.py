"""Console menu for the in-memory expense tracker."""

from __future__ import annotations

import argparse
from typing import Callable, Dict, List, Optional

from expense_index.config import StoreSettings
from expense_index.exceptions import PositionOutOfRangeError, RecordNotFoundError, ValidationError
from expense_index.logging_utils import configure_logging
from expense_index.models import Expense, format_amount
from expense_index.store import ExpenseStore
from expense_index.validators import validate_position

Reader = Callable[[str], str]
Writer = Callable[[str], None]

EXIT_CHOICE = 8

MENU = (
    "\n=== Expense Tracker ===\n"
    "1. Add Expense\n"
    "2. View Expenses\n"
    "3. Filter by Category\n"
    "4. View Category Totals\n"
    "5. Filter by Date\n"
    "6. Delete Expense\n"
    "7. View Top N Expenses\n"
    "8. Exit\n"
    "9. Sort Log by Date\n"
    "10. Compact Deleted Expenses\n"
    "========================"
)


def _format_expense(expense: Expense) -> str:
    return f"${format_amount(expense.amount)} | {expense.category} | {expense.date}"


def view_expenses(store: ExpenseStore, emit: Writer) -> None:
    emit("Index | Amount | Category | Date")
    for entry in store.list():
        if entry.deleted:
            continue
        emit(f"{entry.position} | {_format_expense(entry.expense)}")


def filter_by_category(store: ExpenseStore, category: str, emit: Writer) -> None:
    selection = store.filter_by_category(category)
    if not selection.found:
        emit("No expenses found for this category.")
        return
    emit(f"Expenses for category: {category.strip()}")
    emit("Amount | Date")
    for expense in selection:
        emit(f"${format_amount(expense.amount)} | {expense.date}")


def view_category_totals(store: ExpenseStore, emit: Writer) -> None:
    emit("Total Expenses by Category:")
    for category, total in store.category_totals().items():
        emit(f"{category}: ${format_amount(total)}")


def filter_by_date(store: ExpenseStore, date: str, emit: Writer) -> None:
    selection = store.filter_by_date(date)
    if not selection.found:
        emit(f"No expenses found for date: {date.strip()}")
        return
    emit(f"Expenses for {date.strip()}:")
    emit("Amount | Category")
    for expense in selection:
        emit(f"${format_amount(expense.amount)} | {expense.category}")


def view_top_expenses(store: ExpenseStore, count: str, emit: Writer) -> None:
    expenses = store.top_n(count)
    emit(f"Top {count.strip()} Expenses:")
    emit("Amount | Category | Date")
    for expense in expenses:
        emit(_format_expense(expense))


def _add_expense(store: ExpenseStore, read: Reader, emit: Writer) -> None:
    amount = read("Enter amount: ")
    category = read("Enter category: ")
    date = read("Enter date (YYYY-MM-DD): ")
    position = store.add(amount, category, date)
    emit(f"Expense added at index {position}.")


def _delete_expense(store: ExpenseStore, read: Reader, emit: Writer) -> None:
    position = validate_position(read("Enter index to delete: "), "index")
    store.delete(position)
    emit("Expense deleted lazily.")


def _compact(store: ExpenseStore, emit: Writer) -> None:
    removed = store.compact()
    emit(f"Removed {removed} deleted expenses.")


def _sort_log(store: ExpenseStore, emit: Writer) -> None:
    store.sort_by_date()
    emit("Expenses sorted by date; indexes now follow date order.")


def handle_choice(choice: int, store: ExpenseStore, read: Reader, emit: Writer) -> None:
    actions: Dict[int, Callable[[], None]] = {
        1: lambda: _add_expense(store, read, emit),
        2: lambda: view_expenses(store, emit),
        3: lambda: filter_by_category(store, read("Enter category: "), emit),
        4: lambda: view_category_totals(store, emit),
        5: lambda: filter_by_date(store, read("Enter date (YYYY-MM-DD): "), emit),
        6: lambda: _delete_expense(store, read, emit),
        7: lambda: view_top_expenses(store, read("Enter N: "), emit),
        9: lambda: _sort_log(store, emit),
        10: lambda: _compact(store, emit),
    }
    action = actions.get(choice)
    if action is None:
        emit("Invalid choice. Please pick an option from the menu.")
        return
    try:
        action()
    except ValidationError as exc:
        emit(f"Validation error: {exc}")
    except PositionOutOfRangeError:
        emit("Invalid index.")
    except RecordNotFoundError as exc:
        emit(str(exc))


def run_menu(store: ExpenseStore, read: Reader = input, emit: Writer = print) -> int:
    """Loop over the numbered menu until the exit choice or end of input."""
    while True:
        emit(MENU)
        try:
            raw = read("Enter your choice: ")
        except EOFError:
            return 0
        try:
            choice = int(raw.strip())
        except ValueError:
            emit("Invalid choice. Please enter a number.")
            continue
        if choice == EXIT_CHOICE:
            return 0
        try:
            handle_choice(choice, store, read, emit)
        except EOFError:
            return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Expense Tracker CLI")
    parser.add_argument(
        "--log-level",
        help="Logging level for store diagnostics (default: EXPENSE_TRACKER_LOG_LEVEL or WARNING)",
    )
    parser.add_argument(
        "--sort-on-date-filter",
        action="store_true",
        default=None,
        help="Sort the expense log in place whenever filtering by date",
    )
    parser.add_argument(
        "--fill-top-n",
        action="store_true",
        default=None,
        help="Skip deleted expenses without counting them against N",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = StoreSettings.from_env().with_overrides(
        sort_log_on_date_filter=args.sort_on_date_filter,
        fill_top_n=args.fill_top_n,
        log_level=args.log_level.upper() if args.log_level else None,
    )
    configure_logging(settings.log_level_value)
    return run_menu(ExpenseStore(settings))


if __name__ == "__main__":
    raise SystemExit(main())
