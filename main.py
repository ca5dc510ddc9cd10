"""Simple entrypoint to try the AI Dresser locally."""

import json

from dresser_app.app import AIDresserApp

DEMO_CATALOG = [
    {"id": "demo-top", "name": "Linen Shirt", "brand": "Uniqlo", "category": "clothes",
     "subcategory": "shirt", "price": 1200, "gender": "unisex", "colors": ["white"]},
    {"id": "demo-pants", "name": "Chino Pants", "brand": "Dockers", "category": "clothes",
     "subcategory": "pants", "price": 1800, "gender": "unisex", "colors": ["beige"]},
    {"id": "demo-shoes", "name": "Canvas Sneakers", "brand": "Converse", "category": "shoes",
     "price": 2500, "gender": "unisex", "colors": ["white"]},
]


def main() -> None:
    app = AIDresserApp()
    response = app.agent.get_recommendations(
        {
            "user_id": "demo-user",
            "answers": {"purpose": "personal", "style": "casual", "occasion": "weekend", "budget": 6000},
            "products": DEMO_CATALOG,
        }
    )
    print(json.dumps(response, indent=2, default=str))


if __name__ == "__main__":
    main()
