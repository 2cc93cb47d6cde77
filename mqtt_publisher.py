import json
import queue
import multiprocessing

import paho.mqtt.client as mqtt

STOP = "__STOP__"


def snapshot_payload(device_id, snapshot):
    """Serialize one snapshot of readings as a batched MQTT message body."""
    return json.dumps({
        "device": device_id,
        "batch": True,
        "items": [
            {
                "ts": reading.simulated_time_ms,
                "id": reading.unit_id,
                "temperature": reading.temperature,
                "heatlamp": reading.heatlamp,
            }
            for reading in snapshot
        ],
    })


def _publisher_process(config, device_info, q):
    host = config.get("host", "localhost")
    port = int(config.get("port", 1883))
    username = config.get("username")
    password = config.get("password")
    topic = config.get("topic", "incubators/readings")
    qos = int(config.get("qos", 1))
    device_id = device_info.get("id")

    client = mqtt.Client(mqtt.CallbackAPIVersion.VERSION2,
                         client_id=f"readings-{device_id}")
    if username:
        client.username_pw_set(username, password)

    try:
        client.connect(host, port, 60)
    except OSError as exc:
        print(f"[MQTT] Connection failed: {exc}")
        return

    client.loop_start()
    try:
        while True:
            snapshot = q.get()
            if snapshot == STOP:
                break
            client.publish(topic, snapshot_payload(device_id, snapshot), qos=qos)
    finally:
        client.loop_stop()
        client.disconnect()


class ReadingPublisher:
    """
    Hands reading snapshots to a background MQTT publisher process.

    publish() never blocks: when the hand-off queue is full the snapshot is
    dropped and logged.
    """

    def __init__(self, config, device_info):
        self.config = config or {}
        self.device_info = device_info or {}
        self.enabled = bool(self.config.get("enabled", True))
        self._queue = multiprocessing.Queue(maxsize=int(self.config.get("max_queue", 100)))
        self._process = None
        self.dropped = 0

    def start(self):
        if not self.enabled:
            return
        self._process = multiprocessing.Process(
            target=_publisher_process,
            args=(self.config, self.device_info, self._queue),
            daemon=True
        )
        self._process.start()

    def publish(self, snapshot):
        if not self.enabled:
            return
        try:
            self._queue.put_nowait(tuple(snapshot))
        except queue.Full:
            self.dropped += 1
            print(f"[MQTT] Publisher queue full, dropped snapshot ({self.dropped} total)")

    def stop(self):
        if self._process and self._process.is_alive():
            try:
                self._queue.put_nowait(STOP)
            except queue.Full:
                print("[MQTT] Publisher queue full, terminating publisher")
                self._process.terminate()
            self._process.join(timeout=2)
