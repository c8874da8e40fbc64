API_VERSION = "1.0.5"
