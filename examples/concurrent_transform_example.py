import asyncio

from map_sugar import map_keys, map_keys_and_values, map_values_async, map_values_with_key, run_sync


async def _slow_square(value: int) -> int:
    await asyncio.sleep(0.1)
    return value * value


def main() -> None:
    """Run each helper once and print what it produced."""
    scores = {"alice": 3, "bob": 4, "carol": 5}

    print("map_keys:", map_keys(scores, str.title))
    print("map_values_with_key:", map_values_with_key(scores, lambda value, key: f"{key}={value}"))
    print("map_keys_and_values:", map_keys_and_values(scores, lambda key, value: (value, key)))

    squared = run_sync(map_values_async(scores, _slow_square, limit=2))
    print("map_values_async via run_sync:", squared)


if __name__ == "__main__":
    main()
