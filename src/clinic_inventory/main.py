#!/usr/bin/env python3
"""
Main entry point for the clinic inventory tracker.

Commands:
    serve   Run the REST API
    seed    Load sample clinic items into an empty inventory
"""

import argparse
import sys
from typing import List, Optional

from .config import get_config_manager
from .database import JsonStore, create_json_store
from .exceptions import ClinicInventoryError
from .services import InventoryService, create_llm_service
from .utils import get_logger

SAMPLE_ITEMS = [
    {
        "name": "Nitrile Gloves (M)",
        "category": "PPE",
        "barcode": "0400000000011",
        "currentStock": 120,
        "minThreshold": 100,
        "unitPrice": 0.12,
        "supplier": "MedSupply Co",
    },
    {
        "name": "Surgical Masks",
        "category": "PPE",
        "barcode": "0400000000028",
        "currentStock": 40,
        "minThreshold": 50,
        "unitPrice": 0.25,
        "supplier": "MedSupply Co",
    },
    {
        "name": "Gauze Pads 4x4",
        "category": "Wound Care",
        "barcode": "0400000000035",
        "currentStock": 200,
        "minThreshold": 60,
        "unitPrice": 0.08,
        "supplier": "CareLine Distributors",
    },
    {
        "name": "Alcohol Prep Pads",
        "category": "Consumables",
        "barcode": "0400000000042",
        "currentStock": 0,
        "minThreshold": 100,
        "unitPrice": 0.03,
        "supplier": "CareLine Distributors",
    },
    {
        "name": "Amoxicillin 500mg",
        "category": "Medication",
        "barcode": "0400000000059",
        "currentStock": 30,
        "minThreshold": 20,
        "unitPrice": 0.45,
        "supplier": "PharmaDirect",
        "expirationDate": "2027-01-31",
    },
]


def seed_sample_data(store: JsonStore) -> int:
    """
    Add sample items when the inventory is empty.

    Returns:
        Number of items created
    """
    logger = get_logger("seed")
    service = InventoryService(store)

    if service.list_items():
        logger.info("Inventory already has items, skipping seed")
        return 0

    for data in SAMPLE_ITEMS:
        service.create_item(data)

    logger.info(f"Seeded {len(SAMPLE_ITEMS)} sample items")
    return len(SAMPLE_ITEMS)


def serve(store: JsonStore, host: str, port: int, no_llm: bool = False) -> None:
    """Run the REST API with uvicorn."""
    import uvicorn

    from .api import init_api

    logger = get_logger("main")
    llm_service = None

    if not no_llm:
        try:
            llm_service = create_llm_service()
        except Exception as e:
            logger.warning(f"Text generation disabled: {e}")

    app = init_api(store, llm_service)

    logger.info(f"Clinic inventory API running on http://{host}:{port}")
    uvicorn.run(app, host=host, port=port)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clinic-inventory",
        description="Clinic inventory tracker",
    )
    parser.add_argument("--data-dir", help="Directory holding the JSON tables")

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", help="Bind address")
    serve_parser.add_argument("--port", type=int, help="Port to listen on")
    serve_parser.add_argument(
        "--no-llm", action="store_true", help="Disable chart insights and chat"
    )

    subparsers.add_parser("seed", help="Load sample items into an empty inventory")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main function."""
    args = build_parser().parse_args(argv)
    config = get_config_manager()
    logger = get_logger("main")

    try:
        store = create_json_store(args.data_dir)

        if args.command == "seed":
            seed_sample_data(store)
        elif args.command == "serve":
            serve(
                store,
                host=args.host or config.get("api.host", "0.0.0.0"),
                port=args.port or int(config.get("api.port", 3000)),
                no_llm=args.no_llm,
            )
    except ClinicInventoryError as e:
        logger.error(f"Fatal: {e.message}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
