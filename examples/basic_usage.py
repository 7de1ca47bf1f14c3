#!/usr/bin/env python3
"""
Basic s7link usage examples.

This script demonstrates how to read and write PLC variables and how to
keep a connection alive with auto-reconnect.
"""

import time

from s7link import S7Client, S7Config, S7Error, S7Event, S7Variable
from s7link.utils.logging import setup_logging


def basic_read_write_example():
    """Read a data block and write a few variables."""
    setup_logging(level="INFO")

    config = S7Config(
        name="Press",
        host="192.168.0.10",  # Replace with your PLC IP
        rack=0,
        slot=1,
    )
    client = S7Client(config)

    try:
        with client.session():
            print(f"Connected: {client}")

            info = client.get_cpu_info()
            print(f"CPU: {info.module_type_name} ({info.serial_number})")

            # One range read covering DB10.DBX0.2 .. DB10.DBW13
            print("\n--- Read DB10 ---")
            for v in client.read_range(10, [
                S7Variable("BOOL", start=0, bit=2),
                S7Variable("REAL", start=4),
                S7Variable("INT", start=12),
            ]):
                print(f"  DB10.{v.start}.{v.bit} {v.type.value} = {v.value}")

            # Variables from different areas in one round trip
            print("\n--- Read mixed areas ---")
            for v in client.read_batch([
                S7Variable("BYTE", start=0, area="pe"),
                S7Variable("BOOL", start=3, bit=1, area="mk"),
                S7Variable("DINT", start=20, area="db", db_number=10),
            ]):
                print(f"  {v.area.value}.{v.start}.{v.bit} {v.type.value} = {v.value}")

            print("\n--- Write ---")
            client.write_batch([
                S7Variable("INT", start=12, area="db", db_number=10, value=-5),
                S7Variable("REAL", start=4, area="db", db_number=10, value=21.5),
            ])
            print("  done")

    except S7Error as e:
        print(f"Error: {e}")


def auto_reconnect_example():
    """Poll a value and let the client reconnect on its own."""
    setup_logging(level="INFO")

    client = S7Client(S7Config(host="192.168.0.10", liveness_check_interval=2.0))
    client.on(S7Event.CONNECTED, lambda: print("connected"))
    client.on(S7Event.DISCONNECTED, lambda manual: print(f"disconnected (manual={manual})"))
    client.on(S7Event.CONNECT_ERROR, lambda reason: print(f"connect error: {reason}"))

    try:
        client.auto_connect()
    except S7Error as e:
        print(f"First attempt failed, retrying in background: {e}")

    counter = S7Variable("DINT", start=0, area="db", db_number=1)
    try:
        while True:
            try:
                print(client.read_one(counter).value)
            except S7Error as e:
                print(f"Read failed: {e}")
            time.sleep(1.0)
    except KeyboardInterrupt:
        pass
    finally:
        client.disconnect()


if __name__ == "__main__":
    basic_read_write_example()
