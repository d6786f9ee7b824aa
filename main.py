from product_search.agent import (
    initialize_agent,
    process_search,
    load_product_details,
)
from product_search.constants import EXAMPLE_SEARCHES, SUPPORTED_COUNTRIES
from product_search.display import (
    format_countries,
    format_display_results,
    format_product_details,
    format_stats,
    format_summary_hint,
)
from product_search.exceptions import InvalidInputError
from product_search.filter_input import parse_filter_input
from product_search.session import SearchSession
from pydantic import ValidationError

def run_search(app, client, shaper, session, query):
    try:
        stored = process_search(app, client, shaper, session, query)
    except InvalidInputError:
        print("\nPlease enter a search term.")
        return
    if not stored and session.error:
        print(f"\n{session.error}. Please try again.")
        return
    print(format_stats(session.stats))
    print(format_display_results(session))

def handle_command(app, client, shaper, session, command, argument):
    """Apply one refinement command. Returns False when the user asks for a new search."""
    if command == "new":
        return False
    if command == "filter":
        session.update_filters(**parse_filter_input(argument))
    elif command == "sort":
        session.update_filters(**parse_filter_input(f"sort={argument}"))
    elif command == "clear":
        session.clear_filters()
    elif command == "country":
        if argument.lower() not in SUPPORTED_COUNTRIES:
            print(f"Unknown country '{argument}'. Choose one of: {format_countries()}")
            return True
        session.update_filters(country=argument)
        run_search(app, client, shaper, session, session.query)
        return True
    elif command == "details":
        session.select_product(int(argument))
        details = load_product_details(client, session)
        if details:
            print(format_product_details(details))
        else:
            print(f"\n{session.error}. Please try again.")
        session.close_product()
        return True
    else:
        print("Unknown command.")
        print("\n".join(format_summary_hint()))
        return True

    print(format_display_results(session))
    return True

if __name__ == "__main__":
    client, shaper, app = initialize_agent()
    session = SearchSession(shaper=shaper, default_country=client.config.DEFAULT_COUNTRY)

    print("Multi-Vendor Product Search")
    print(f"Try: {', '.join(EXAMPLE_SEARCHES)}")

    try:
        while True:
            user_input = input("\nWhat are you looking for? (or 'quit' to exit): ").strip()
            if user_input.lower() == 'quit':
                break

            run_search(app, client, shaper, session, user_input)
            if not session.products:
                continue

            print("\n".join(format_summary_hint()))
            keep_refining = True
            while keep_refining:
                raw = input("\nRefine (or 'new', 'quit'): ").strip()
                if raw.lower() == 'quit':
                    raise SystemExit(0)
                command, _, argument = raw.partition(" ")
                try:
                    keep_refining = handle_command(app, client, shaper, session, command.lower(), argument.strip())
                except (ValueError, IndexError, ValidationError) as e:
                    print(f"Could not apply '{raw}': {e}")
    finally:
        client.close()
