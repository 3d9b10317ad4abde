import json
from pathlib import Path
from typing import Dict, Any, Optional

from .models import Profile
from .rewards import RewardState, tier_for


def load_store(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as f:
            content = f.read().strip()
            if not content:
                return {}
            return json.loads(content)
    except (json.JSONDecodeError, IOError):
        return {}


def save_store(path: Path, store: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(store, f, indent=2, ensure_ascii=False)


def load_profile(store: Dict[str, Any]) -> Profile:
    return Profile.from_dict(store.get("profile", {}))


def put_profile(store: Dict[str, Any], profile: Profile) -> None:
    store["profile"] = profile.to_dict()


def load_rewards(store: Dict[str, Any], initial_points: int = 450) -> RewardState:
    data: Optional[Dict[str, Any]] = store.get("rewards")
    if not data:
        return RewardState.initial(initial_points)
    points = int(data.get("points", initial_points))
    previous = data.get("previous_tier_id")
    if previous is None:
        previous = tier_for(points).id
    return RewardState(points=points, previous_tier_id=int(previous))


def put_rewards(store: Dict[str, Any], state: RewardState) -> None:
    store["rewards"] = {"points": state.points, "previous_tier_id": state.previous_tier_id}
