#!/usr/bin/env python3
"""
Display all events listed by a strategy (the developer strategy by default).

Usage:
    python scripts/show_all_events.py [provider] [match_name]
"""

import sys

from omnievent.factory import list_events
from omnievent.logger import configure_logging

configure_logging()

provider = sys.argv[1] if len(sys.argv) > 1 else "developer"
options = {"match_name": sys.argv[2]} if len(sys.argv) > 2 else {}

events = list_events(provider, **options)

print("\n" + "=" * 90)
print(f"ALL EVENTS LISTED BY {provider.upper()}")
print("=" * 90)

if events is None:
    print("\nStrategy is not authorized.\n")
    sys.exit(1)

print(f"\nTotal Events: {len(events)}\n")

for i, event in enumerate(events, 1):
    print(f"{i:2d}. {event.data.name}")
    print(f"    Start: {event.data.start_time}")
    if event.data.end_time:
        print(f"    End: {event.data.end_time}")
    location = event.associated_data.location
    if location:
        print(f"    Location: {location.address or '-'}, {location.city or '-'}")
    if event.associated_data.virtual_location:
        print(f"    Online: {event.associated_data.virtual_location}")
    print(f"    UID: {event.metadata.uid}")
    print()

print("=" * 90)
