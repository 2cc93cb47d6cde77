#!/usr/bin/env python3
"""
Incubator Room Simulator

Runs a row of heatlamp incubators in a room whose door can open, publishes
readings over MQTT and accepts heatlamp commands over MQTT (and optionally
HTTP). Simulated time runs 10x real time by default.
"""

import argparse
import time

from settings import load_settings
from controllers import IncubatorController


def show_help():
    """Display help menu"""
    print("""
==================================================
COMMANDS
==================================================
  s - Status          h - Help            q - Quit

  HEATLAMPS:
  on N   - Lamp ON      bust N - Break lamp
  off N  - Lamp OFF     fix N  - Fix lamp

  ROOM:
  open   - Door OPEN    close  - Door CLOSE
==================================================""")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Incubator room simulator")
    parser.add_argument("--settings", default="settings.json",
                        help="settings file (relative paths resolve next to settings.py)")
    parser.add_argument("--duration", type=float, default=None,
                        help="run unattended for this many real seconds, then stop")
    return parser.parse_args(argv)


def run_for(controller, duration):
    """Run unattended for `duration` seconds, then show a final status"""
    print(f"[SYSTEM] Running for {duration}s...")
    try:
        time.sleep(duration)
    except KeyboardInterrupt:
        print("\n\nExiting...")
    controller.show_status()


def run_console(controller):
    show_help()
    running = True
    while running:
        try:
            cmd = input("\n> ").strip().lower()

            if not cmd:
                continue
            elif cmd == 'h':
                show_help()
            elif cmd == 'q':
                running = False
                print("\nExiting...")
            else:
                result = controller.handle_command(cmd)
                if result is None:
                    print("Unknown command. Press 'h' for help.")

        except (KeyboardInterrupt, EOFError):
            running = False
            print("\n\nExiting...")


def main(argv=None):
    """Main entry point"""
    args = parse_args(argv)

    print("\n" + "=" * 50)
    print("  INCUBATOR ROOM SIMULATOR")
    print("=" * 50 + "\n")

    settings = load_settings(args.settings)
    controller = IncubatorController(settings)

    controller.start()
    print("\n[SYSTEM] Running...  (press 'h' for help)\n")

    try:
        if args.duration is not None:
            run_for(controller, args.duration)
        else:
            run_console(controller)
    finally:
        controller.cleanup()
    print("[SYSTEM] Done.")


if __name__ == "__main__":
    main()
