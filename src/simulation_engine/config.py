# Season shape for the demo league
DEMO_CONTESTANTS = 24
DEMO_EPISODES = 13
DEMO_LEAGUE_ID = "00000000-0000-0000-0000-000000000050"
DEMO_INVITE_CODE = "PVRS50"
DAYS_BETWEEN_EPISODES = 7

# Bot behaviour
DEFAULT_PLAYERS = 7
DEFAULT_EPISODES_TO_SIM = 3
DEFAULT_MISS_RATE = 0.25  # 25% chance a bot skips a week
DEFAULT_ELIMINATED_PER_EPISODE = 1

# Bots submit picks this many hours before air time
PICK_LEAD_HOURS = 1

BOT_NAMES = [
    "Jeff Probst Fan",
    "TorchSnuffer42",
    "TribalCouncil",
    "IdolHunter",
    "MergeOrBust",
    "BlindSided",
    "FinalTribal",
    "OutwitOutplay",
    "SurvivorSuperfan",
    "CoconutBandit",
]

TRIBES = ["Vatu", "Cila", "Kalo"]
