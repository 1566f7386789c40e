"""Example: two components sharing one registry, with statistics gathered from notifications."""

import random
import re
from datetime import datetime

from topical import Registry, load_settings
from topical.observability import RegistryStats, configure_logging

TOPICS = ["beep", "boop", "bap", "baz", "foo"]


def component1(registry: Registry) -> None:
    registry.subscribe(re.compile(r"^b.+p$"), lambda event: print("component1:", event))


def component2(registry: Registry) -> None:
    registry.list(lambda event: print("component2 broadcast:", event))
    registry.subscribe(re.compile(r"^ba.+"), lambda event: print("component2:", event))


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)

    registry = Registry(settings)
    stats = RegistryStats().attach(registry)

    for name in TOPICS:
        registry.add_topic(name)

    component1(registry)
    component2(registry)

    # Simulate some chatter
    for _ in range(1000):
        rand = random.random()
        if rand > 0.9:
            registry.broadcast(f"The time is now {datetime.now().isoformat()}...")
            continue
        topic = TOPICS[min(int(rand / 0.2), len(TOPICS) - 1)]
        registry.publish(topic, "bebop" if rand > 0.5 else "woot")

    print(stats.snapshot())


if __name__ == "__main__":
    main()
