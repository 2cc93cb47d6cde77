"""
MQTT command listener.

Subscribes to the command topic and forwards every message to a
CommandIngestor. Messages are JSON objects:

    {"time": <sender ms>, "command": <1-6>, "id": <unit index>}

The paho network thread delivers messages, so ingestion runs concurrently
with the simulation loop; the CommandQueue is the only state they share.
"""

import json

import paho.mqtt.client as mqtt


class CommandListener:

    TOPIC_COMMANDS = "incubators/commands"

    def __init__(self, mqtt_cfg, device_id, ingestor, topic=None, qos=1):
        """
        Parameters
        ----------
        mqtt_cfg  : dict             – MQTT broker settings (host, port, …)
        device_id : str              – used for the client id and log tags
        ingestor  : CommandIngestor  – receives every decoded command
        topic     : str              – command topic (defaults to TOPIC_COMMANDS)
        """
        self._cfg       = mqtt_cfg
        self._device_id = device_id
        self._ingestor  = ingestor
        self._topic     = topic or self.TOPIC_COMMANDS
        self._qos       = qos
        self._client    = None
        self._connected = False

    # ========== LIFECYCLE ==========

    def start(self):
        if not self._cfg.get('enabled', True):
            print(f"[{self._device_id}] MQTT disabled – command listener inactive")
            return

        host = self._cfg.get('host', 'localhost')
        port = self._cfg.get('port', 1883)

        self._client = mqtt.Client(
            mqtt.CallbackAPIVersion.VERSION2,
            client_id=f"commands-{self._device_id}",
            clean_session=True,
        )

        user = self._cfg.get('username')
        pwd  = self._cfg.get('password')
        if user:
            self._client.username_pw_set(user, pwd)

        self._client.on_connect    = self._on_connect
        self._client.on_disconnect = self._on_disconnect
        self._client.on_message    = self._on_message

        try:
            self._client.connect(host, port, keepalive=60)
            self._client.loop_start()          # background network thread
        except OSError as exc:
            print(f"[{self._device_id}] Connection failed: {exc}")

    def stop(self):
        if self._client:
            self._client.loop_stop()
            self._client.disconnect()
        self._connected = False

    # ========== MQTT CALLBACKS ==========

    def _on_connect(self, client, userdata, flags, reason_code, properties=None):
        if reason_code.is_failure:
            print(f"[{self._device_id}] Connection refused ({reason_code})")
            return
        self._connected = True
        client.subscribe(self._topic, qos=self._qos)
        print(f"[MQTT] Listening for commands on {self._topic}")

    def _on_disconnect(self, client, userdata, flags, reason_code, properties=None):
        self._connected = False
        if reason_code.is_failure:
            print(f"[{self._device_id}] Unexpected disconnect ({reason_code})")

    def _on_message(self, client, userdata, msg):
        try:
            payload = json.loads(msg.payload.decode())
        except (UnicodeDecodeError, ValueError):
            print(f"[CMD] Ignoring undecodable message on {msg.topic}")
            return
        self._ingestor.ingest_payload(payload)

    # ========== QUERY ==========

    def is_connected(self):
        return self._connected
