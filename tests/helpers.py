"""Constants and payload builders shared by the test modules."""

from typing import Any

STRONG_PASSWORD = "Bistr0t#Cuisine2024"
SUPERUSER_EMAIL = "root@hygieneresto.fr"
SUPERUSER_PASSWORD = "R00t#Hygiene-Resto"
ADMIN_CLIENT_SIRET = "12345678900012"
OTHER_SIRET = "98765432100034"
EMPLOYEE_EMAIL = "paul@bistrot.fr"
EMPLOYEE_PASSWORD = "Commis#Password1"


def register_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "nom_entreprise": "Le Petit Bistrot",
        "nom_client": "Martin",
        "prenom_client": "Claire",
        "email": "claire@bistrot.fr",
        "password": STRONG_PASSWORD,
        "telephone": "0102030405",
        "adresse": "12 rue des Halles, Lyon",
        "siret": ADMIN_CLIENT_SIRET,
        "role": "admin_client",
    }
    payload.update(overrides)
    return payload


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def temperature_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "type": "fridge",
        "location": "Cold room",
        "temperature": 3.5,
        "temperature_type": "positive",
        "timestamp": "2024-05-02T08:30:00",
        "notes": "Morning check",
    }
    payload.update(overrides)
    return payload


def traceability_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "designation": "Beef bourguignon",
        "quantity_value": 4.5,
        "quantity_unit": "kg",
        "date_transformation": "2024-05-02",
        "date_limite_consommation": "2024-05-05",
        "image_url": "https://cdn.bistrot.fr/labels/42.jpg",
    }
    payload.update(overrides)
    return payload
