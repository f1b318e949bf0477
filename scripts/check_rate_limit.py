import argparse
import os
import requests

# Make sure the API is running (python start.py)
BASE_URL = os.getenv("API_BASE_URL", "http://127.0.0.1:4000")
ENDPOINT_TO_TEST = "/api/events"
# Default limit is 150 per minute per client address
DEFAULT_REQUESTS = 160


def login(email, password):
    response = requests.post(
        f"{BASE_URL}/api/auth/login", json={"email": email, "password": password}
    )
    if response.status_code != 200:
        print(f"Login failed ({response.status_code}), continuing anonymously")
        return None
    return response.json()["token"]


def main():
    parser = argparse.ArgumentParser(description="Fire requests until the limiter answers 429")
    parser.add_argument("-n", "--requests", type=int, default=DEFAULT_REQUESTS)
    parser.add_argument("--email", default=os.getenv("ADMIN_EMAIL", "admin@cems.com"))
    parser.add_argument("--password", default=os.getenv("ADMIN_PASSWORD", "admin123"))
    args = parser.parse_args()

    headers = {}
    token = login(args.email, args.password)
    if token:
        headers["Authorization"] = f"Bearer {token}"

    target_url = f"{BASE_URL}{ENDPOINT_TO_TEST}"
    print(f"Testing rate limiting on: {target_url} with {args.requests} requests")
    print("-" * 30)

    success_count = 0
    rate_limit_hit_count = 0
    first_limited = None

    for request_num in range(1, args.requests + 1):
        try:
            response = requests.get(target_url, headers=headers)
        except requests.exceptions.ConnectionError as e:
            print(f"\nError: Could not connect to {BASE_URL}. Is the server running?")
            print(f"Details: {e}")
            return

        if response.status_code == 200:
            success_count += 1
        elif response.status_code == 429:
            rate_limit_hit_count += 1
            if first_limited is None:
                first_limited = request_num
        else:
            print(f"Request {request_num}: unexpected status code {response.status_code}")

    print("-" * 30)
    print("Test Summary:")
    print(f"  Successful requests (Status 200): {success_count}")
    print(f"  Rate limited requests (Status 429): {rate_limit_hit_count}")
    if first_limited:
        print(f"  First 429 on request {first_limited}")
    else:
        print("  No rate limit triggered. Check RATELIMIT_ENABLED and the limiter storage.")


if __name__ == "__main__":
    main()
