"""
Configurazione centralizzata - modifica qui regole fiscali, mapping canali ed etichette.
"""

import logging
import os

# Tassa di soggiorno (regolamento comunale)
TOURIST_TAX_RATE = 2.0          # € per persona per notte
TOURIST_TAX_MAX_NIGHTS = 3      # notti massime tassabili per soggiorno
TOURIST_TAX_MIN_AGE = 14        # sotto questa età l'ospite è esente

# Canali soggetti a tassa (substring case-insensitive su nome canale o sorgente iCal)
TAXABLE_CHANNEL_KEYWORDS = (
    "booking",
    "airbnb",
)

# Prenotazioni dirette: mai tassate, anche se il nome contiene altre keyword
DIRECT_CHANNEL_KEYWORDS = (
    "dirett",   # "Diretto", "Diretta"
    "direct",
)

# Approssimazione mese per il riparto costi fissi (non calendario esatto)
DAYS_PER_MONTH = 30

# Etichette report
DIRECT_CHANNEL_LABEL = "Diretto"
GENERIC_COSTS_LABEL = "Condivisi"
UNCATEGORIZED_LABEL = "Altro"
NIGHTS_BUCKET_LABELS = {
    "1": "1 notte",
    "2": "2 notti",
    "3+": "3 o più notti",
}

# Logging
LOG_LEVEL = os.environ.get("AFFITTI_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def configure_logging(level: str = None) -> None:
    """Configura il logging di base (stream handler su stderr)."""
    logging.basicConfig(level=level or LOG_LEVEL, format=LOG_FORMAT)
