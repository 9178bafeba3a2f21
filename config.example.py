"""
Configuration file for the status rotation bot.
Copy this to config.py and fill in your values.
"""

# Discord Configuration
GUILD_IDS = [123456789012345678]  # Guilds to sync the /status commands to
BOT_TOKEN = "YOUR_BOT_TOKEN_HERE"  # Replace with your bot token

# Rotation notices (started, stopped due to an error, ...) are posted here; None = log only
NOTIFY_CHANNEL_ID = None

# Members with one of these roles (or Manage Server) may use /status
MANAGER_ROLE_NAMES = ["Moderators", "Admins"]

# Runtime
DATA_DIR = "data"  # rotation.json lives here
LOG_LEVEL = "INFO"
