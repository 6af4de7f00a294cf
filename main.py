import logging
import sys

from warehouse import app
from warehouse.floor_map import build_floor_plan, render_floor_plan


def print_floor_maps(tracker) -> int:
    floors = tracker.all_floors.fetch()
    if not floors:
        print("Warehouse is not set up yet")
        return 1
    products = tracker.all_products.fetch()
    for floor in floors:
        print(render_floor_plan(build_floor_plan(floor, products)))
        print()
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sys.exit(print_floor_maps(app.create_tracker()))
