#!/usr/bin/env python3
"""Start script that reads the PORT environment variable and runs uvicorn."""

import os
import sys
import subprocess

port = os.environ.get("PORT", "3000")

try:
    port_int = int(port)
except ValueError:
    print(f"Warning: Invalid PORT value '{port}', using default 3000", file=sys.stderr)
    port_int = 3000

# Allow running from a checkout without `pip install -e .`
src_path = os.path.abspath("src")
pythonpath = os.environ.get("PYTHONPATH", "")
os.environ["PYTHONPATH"] = f"{src_path}:{pythonpath}" if pythonpath else src_path

cmd = [
    sys.executable,
    "-m",
    "uvicorn",
    "mapa_clientes.main:app",
    "--host",
    "0.0.0.0",
    "--port",
    str(port_int),
    "--proxy-headers",
    "--forwarded-allow-ips", "*",
]

print(f"🚀 Servidor: http://localhost:{port_int}", file=sys.stderr)
print(f"🩺 Health:   http://localhost:{port_int}/health", file=sys.stderr)
print(f"🧩 Debug:    http://localhost:{port_int}/debug/store", file=sys.stderr)
print(f"🔎 Buscar:   http://localhost:{port_int}/clientes/buscar?cd=AV46&cliente=12565416", file=sys.stderr)

sys.exit(subprocess.call(cmd))
