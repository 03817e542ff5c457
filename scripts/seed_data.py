#!/usr/bin/env python3
"""
MongoDB Database Seed Script.

Creates sample users, boards, pins, follows and comments for development.
Everything goes through the service layer, so counters, activity scores
and board membership come out exactly as they would through the API.

Usage:
    python scripts/seed_data.py

Test Accounts (after seeding):
    - alice@example.com / Alice123!
    - bob@example.com / Bob12345!
    - carol@example.com / Carol123!
"""
import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from motor.motor_asyncio import AsyncIOMotorClient

from pinboard.config import settings
from pinboard.db.mongodb import create_indexes
from pinboard.schemas.board import BoardCreate
from pinboard.schemas.pin import PinCreate
from pinboard.schemas.user import RegisterRequest
from pinboard.services import boards as board_service
from pinboard.services import comments as comment_service
from pinboard.services import pins as pin_service
from pinboard.services import users as user_service

USERS = [
    {"username": "alice", "email": "alice@example.com", "password": "Alice123!", "full_name": "Alice Moreau"},
    {"username": "bob", "email": "bob@example.com", "password": "Bob12345!", "full_name": "Bob Lindqvist"},
    {"username": "carol", "email": "carol@example.com", "password": "Carol123!", "full_name": "Carol Okafor"},
]

BOARDS = [
    # (owner username, board)
    ("alice", {"name": "Kitchen Ideas", "description": "Open shelving and warm wood", "category": "home"}),
    ("alice", {"name": "Gift List", "description": "Shh", "privacy": "secret", "category": "misc"}),
    ("bob", {"name": "Trail Running", "description": "Routes and gear", "category": "sports"}),
    ("carol", {"name": "Weeknight Dinners", "description": "Thirty minutes or less", "category": "food"}),
]

PINS = [
    # (board name, pin)
    ("Kitchen Ideas", {
        "title": "Floating oak shelves",
        "description": "Simple brackets, thick boards",
        "image_url": "https://images.example.com/shelves.jpg",
        "link": "https://example.com/diy-shelves",
        "tags": ["diy", "kitchen", "wood"],
        "category": "home",
    }),
    ("Kitchen Ideas", {
        "title": "Terracotta tiles",
        "image_url": "https://images.example.com/tiles.jpg",
        "tags": ["kitchen", "tiles"],
        "category": "home",
    }),
    ("Gift List", {
        "title": "Ceramic pour-over set",
        "image_url": "https://images.example.com/pourover.jpg",
        "tags": ["coffee"],
        "category": "misc",
    }),
    ("Trail Running", {
        "title": "Ridge loop at sunrise",
        "description": "14 km, 600 m of climbing",
        "image_url": "https://images.example.com/ridge.jpg",
        "tags": ["running", "outdoors"],
        "category": "sports",
    }),
    ("Weeknight Dinners", {
        "title": "Miso butter noodles",
        "description": "Fifteen minutes, one pan",
        "image_url": "https://images.example.com/noodles.jpg",
        "link": "https://example.com/recipes/miso-noodles",
        "tags": ["noodles", "quick"],
        "category": "food",
    }),
]


async def seed_users(db) -> dict:
    """Create sample users; returns username -> user document."""
    users = {}
    for user_data in USERS:
        existing = await db.users.find_one({"email": user_data["email"]})
        if existing:
            print(f"User {user_data['email']} already exists, skipping...")
            users[existing["username"]] = existing
            continue

        user = await user_service.register_user(db, RegisterRequest(**user_data))
        users[user["username"]] = user
        print(f"Created user: {user_data['email']}")
    return users


async def seed_boards(db, users: dict) -> dict:
    boards = {}
    for owner_name, board_data in BOARDS:
        owner = users[owner_name]
        existing = await db.boards.find_one({"name": board_data["name"], "owner_id": str(owner["_id"])})
        if existing:
            print(f"Board '{board_data['name']}' already exists, skipping...")
            boards[existing["name"]] = existing
            continue

        board = await board_service.create_board(db, owner, BoardCreate(**board_data))
        boards[board["name"]] = board
        print(f"Created board: {board['name']} (owner: {owner_name}, {board['privacy']})")
    return boards


async def seed_pins(db, users: dict, boards: dict) -> list:
    owners = {str(user["_id"]): user for user in users.values()}
    pins = []
    for board_name, pin_data in PINS:
        board = boards[board_name]
        existing = await db.pins.find_one({"title": pin_data["title"]})
        if existing:
            print(f"Pin '{pin_data['title']}' already exists, skipping...")
            pins.append(existing)
            continue

        owner = owners[board["owner_id"]]
        pin = await pin_service.create_pin(
            db, owner, PinCreate(**pin_data, board_id=str(board["_id"]))
        )
        pins.append(pin)
        print(f"Created pin: {pin['title']} (board: {board_name})")
    return pins


async def seed_social(db, users: dict, pins: list) -> None:
    """Follows, saves and a few comments."""
    follows = [("bob", "alice"), ("carol", "alice"), ("alice", "carol")]
    for follower, target in follows:
        if str(users[target]["_id"]) in users[follower].get("following", []):
            continue
        await user_service.follow_user(db, users[follower], target)
        print(f"{follower} now follows {target}")

    public_pins = [pin for pin in pins if not pin.get("is_private")]
    for pin in public_pins:
        for user in users.values():
            user_id = str(user["_id"])
            if user_id == pin["owner_id"] or user_id in pin.get("saves", []):
                continue
            await pin_service.save_pin(db, str(pin["_id"]), user)

    if public_pins and not public_pins[0].get("comment_count"):
        await comment_service.create_comment(
            db, str(public_pins[0]["_id"]), users["bob"], "Those brackets look great!"
        )
        print("Added sample comments")


async def main():
    """Run the seed script."""
    print("=" * 50)
    print("Starting MongoDB seed...")
    print("=" * 50)

    client = AsyncIOMotorClient(settings.MONGODB_URL)
    db = client[settings.MONGODB_DB_NAME]

    try:
        await client.admin.command('ping')
        print(f"\nConnected to MongoDB: {settings.MONGODB_DB_NAME}")
        await create_indexes(db)

        print("\n--- Seeding Users ---")
        users = await seed_users(db)

        print("\n--- Seeding Boards ---")
        boards = await seed_boards(db, users)

        print("\n--- Seeding Pins ---")
        pins = await seed_pins(db, users, boards)

        print("\n--- Seeding Follows, Saves & Comments ---")
        await seed_social(db, users, pins)

        print("\n" + "=" * 50)
        print("MongoDB seeding completed successfully!")
        print("=" * 50)
        print("\nTest credentials:")
        for user_data in USERS:
            print(f"  {user_data['email']} / {user_data['password']}")

    except Exception as e:
        print(f"\nError during seeding: {e}")
        raise
    finally:
        client.close()


if __name__ == "__main__":
    asyncio.run(main())
