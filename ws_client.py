"""Simple WebSocket client to exercise the /ws endpoint."""
import asyncio
import json
import os

import websockets


async def watch_scene():
    uri = f"ws://127.0.0.1:{os.environ.get('PORT', '3000')}/ws"
    print(f"Connecting to {uri}...")

    try:
        async with websockets.connect(uri) as websocket:
            print("Connected!")

            # Move the goldfish to the right edge of the tank
            await websocket.send(json.dumps({"type": "pointer", "x": 1.0, "y": 0.0}))

            received = 0
            while received < 3:
                data = json.loads(await websocket.recv())

                if data["type"] == "state":
                    received += 1
                    payload = data["payload"]
                    g = payload["goldfish"]
                    print(f"\n--- Frame {received} (tick {payload['tick']}) ---")
                    print(f"Goldfish: x={g['x']:.2f}, y={g['y']:.2f}, z={g['z']:.2f}")
                    print(f"Sharks: {len(payload['sharks'])}, small fish: {len(payload['small_fish'])}")
                elif data["type"] == "proximity":
                    print(f"Proximity: {data['payload']}")
                else:
                    print(f"Unexpected message type: {data['type']}")
                    print(f"Message: {data}")

    except Exception as e:
        print(f"Error: {e}")


if __name__ == "__main__":
    asyncio.run(watch_scene())
