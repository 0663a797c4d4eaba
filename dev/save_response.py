#!/usr/bin/env python3
"""Fetch a payroll API response and save it to dev/result.json.

    python dev/save_response.py --planilla 3
    python dev/save_response.py http://localhost:8000/api/liquidaciones/7?fecha_salida=2024-06-30
    python dev/save_response.py http://localhost:8000/api/planillas/ --post body.json
"""
import json
import os
import argparse

import requests

API = os.getenv("PLANILLA_API", "http://localhost:8000")


def main():
    parser = argparse.ArgumentParser(description="Fetch API response and save to dev/result.json")
    parser.add_argument("url", nargs="?", default=f"{API}/", help="Target URL")
    parser.add_argument("--planilla", type=int, help="Fetch the review summary of this payroll id")
    parser.add_argument("--post", metavar="FILE", help="POST the JSON body in FILE instead of GET")
    args = parser.parse_args()

    url = f"{API}/api/planillas/{args.planilla}/resumen" if args.planilla else args.url
    if args.post:
        with open(args.post, encoding="utf-8") as fp:
            resp = requests.post(url, json=json.load(fp), timeout=30)
    else:
        resp = requests.get(url, timeout=30)

    resp.raise_for_status()
    try:
        data = resp.json()
    except ValueError:
        data = resp.text
    os.makedirs("dev", exist_ok=True)
    path = os.path.join("dev", "result.json")
    with open(path, "w", encoding="utf-8") as f:
        if isinstance(data, (dict, list)):
            json.dump(data, f, ensure_ascii=False, indent=2)
        else:
            f.write(str(data))
    print(f"API response from {url} saved to {path}")


if __name__ == "__main__":
    main()
