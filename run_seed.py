"""
Seed the database with a sample user, deck and cards
Run: python run_seed.py [password]
"""
import sys
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

src_path = Path(__file__).parent / "src"
sys.path.insert(0, str(src_path))


def main() -> None:
    from flashdeck.api.auth import get_password_hash
    from flashdeck.models.database import SessionLocal, create_tables
    from flashdeck.models.seed import SAMPLE_EMAIL, seed_sample_data

    password = sys.argv[1] if len(sys.argv) > 1 else "flashdeck"
    create_tables()
    db = SessionLocal()
    try:
        seed_sample_data(db, get_password_hash(password))
    finally:
        db.close()
    print(f"Seeded sample data; log in as {SAMPLE_EMAIL}")


if __name__ == "__main__":
    main()
