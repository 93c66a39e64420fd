import os

# Preload so config validation fails the master process, not each worker
preload_app = True

# Artwork validation is CPU-bound (decode/resample); scale with workers, not threads
workers = int(os.environ.get("WEB_CONCURRENCY", "2"))

# Bind
bind = f"0.0.0.0:{os.environ.get('PORT', '8080')}"

# Logging
accesslog = "-"
errorlog = "-"
loglevel = "info"

# Large PSD/PDF uploads plus upscaling can take a while
timeout = 120
