"""Incubator room controller - wires the simulation to its transports"""

import threading

from components import Incubator
from controllers.command_ingestor import CommandIngestor
from controllers.command_listener import CommandListener
from mqtt_publisher import ReadingPublisher
from settings import simulation_settings
from simulators import CommandKind, CommandQueue, IncubatorSimulator, DEFAULT_SCENARIO

CONSOLE_COMMANDS = {
    'on':    CommandKind.HEATLAMP_ON,
    'off':   CommandKind.HEATLAMP_OFF,
    'open':  CommandKind.DOOR_OPEN,
    'close': CommandKind.DOOR_CLOSED,
    'bust':  CommandKind.BUST_HEATLAMP,
    'fix':   CommandKind.FIX_HEATLAMP,
}


def scenario_from_settings(entries):
    """Convert settings scenario entries into (delay_ms, kind, unit_id) triples."""
    if entries is None:
        return DEFAULT_SCENARIO
    return tuple(
        (int(e["delay_ms"]), CommandKind[e["command"]], e.get("id"))
        for e in entries
    )


class IncubatorController:
    """Controller for the incubator room simulation"""

    def __init__(self, settings, start_time_ms=None):
        self.settings = settings
        self.sim_cfg = simulation_settings(settings)
        self.device_id = settings.get("device", {}).get("id", "INCUBATORS")
        self.incubators = []
        self.running = False
        self._web_thread = None
        self._init_components(start_time_ms)

    def _init_components(self, start_time_ms):
        cfg = self.sim_cfg
        print("=" * 50)
        print("Initializing incubator room...")
        print("=" * 50)

        for _ in range(int(cfg["incubators"])):
            self.incubators.append(Incubator(
                cfg["room_temperature"],
                cfg["halflife_steps"],
                cfg["room_temperature"],
                heatlamp_temperature=cfg["heatlamp_temperature"],
            ))
        print(f"  {len(self.incubators)} incubators at {cfg['room_temperature']}C "
              f"(half-life {cfg['halflife_seconds']}s)")

        mqtt_cfg = self.settings.get("mqtt", {})
        publisher_cfg = dict(mqtt_cfg)
        publisher_cfg.update(self.settings.get("publisher", {}))
        self.publisher = ReadingPublisher(publisher_cfg, {"id": self.device_id})

        self.command_queue = CommandQueue()
        self.simulator = IncubatorSimulator(
            self.incubators,
            self.command_queue,
            publisher=self.publisher,
            step_ms=cfg["step_ms"],
            reading_interval_ms=cfg["reading_interval_ms"],
            tick_seconds=cfg["tick_seconds"],
            start_time_ms=start_time_ms,
            room_temperature=cfg["room_temperature"],
            outside_near=cfg["outside_temperature_near"],
            outside_far=cfg["outside_temperature_far"],
            on_dispatch=self._on_dispatch,
        )
        self.ingestor = CommandIngestor(self.command_queue, self.simulator)

        commands_cfg = self.settings.get("commands", {})
        self.listener = CommandListener(
            mqtt_cfg,
            self.device_id,
            self.ingestor,
            topic=commands_cfg.get("topic"),
            qos=int(commands_cfg.get("qos", 1)),
        )

        scenario = scenario_from_settings(self.settings.get("scenario"))
        self.simulator.schedule(scenario)
        print(f"  {len(scenario)} scenario events scheduled")
        print("=" * 50)

    # ========== CALLBACKS ==========

    def _on_dispatch(self, record):
        print(f"[CMD] Applied {record}")

    # ========== CONTROL ==========

    def start(self):
        """Start publisher, simulation loop, and command transports"""
        self.running = True
        self.publisher.start()
        self.simulator.start()
        self.listener.start()

        web_cfg = self.settings.get("webapp", {})
        if web_cfg.get("enabled", False):
            from webapp import create_app
            app = create_app(self.simulator, self.ingestor)
            self._web_thread = threading.Thread(
                target=app.run,
                kwargs={
                    "host": web_cfg.get("host", "127.0.0.1"),
                    "port": int(web_cfg.get("port", 5000)),
                    "use_reloader": False,
                },
                daemon=True,
            )
            self._web_thread.start()
            print(f"[WEB] API on {web_cfg.get('host', '127.0.0.1')}:{web_cfg.get('port', 5000)}")

    def stop(self):
        """Stop ingestion first, then join the loop, then the publisher"""
        self.running = False
        self.listener.stop()
        self.simulator.stop(timeout=2)
        self.publisher.stop()

    def cleanup(self):
        self.stop()

    # ========== STATUS ==========

    def get_status(self):
        """Status from the latest emitted snapshot"""
        return {
            "state": self.simulator.get_state(),
            "time": self.simulator.current_time_ms,
            "pending": len(self.command_queue),
            "readings": list(self.simulator.latest_snapshot),
        }

    def show_status(self):
        status = self.get_status()
        elapsed = (status["time"] - self.simulator.start_time_ms) / 1000
        print("\n" + "=" * 40)
        print(f"INCUBATORS  {status['state']}  t+{elapsed:.1f}s")
        print("=" * 40)
        if not status["readings"]:
            print("  No readings yet")
        for reading in status["readings"]:
            lamp = "ON" if reading.heatlamp else "OFF"
            print(f"  [{reading.unit_id}] {reading.temperature:6.2f}C  lamp {lamp}")
        print(f"  Pending commands: {status['pending']}")
        print("=" * 40)

    # ========== COMMANDS ==========

    def handle_command(self, cmd):
        """Handle a console command. Returns None if the command is unknown."""
        parts = cmd.split()
        if not parts:
            return None

        if parts[0] == 's':
            self.show_status()
            return True

        kind = CONSOLE_COMMANDS.get(parts[0])
        if kind is None:
            return None

        unit_id = None
        if not kind.is_room_wide:
            if len(parts) != 2 or not parts[1].isdigit():
                print(f"Usage: {parts[0]} <unit>")
                return False
            unit_id = int(parts[1])

        record = self.ingestor.ingest(int(kind), unit_id)
        print(f"[CMD] Queued {record}")
        return True
