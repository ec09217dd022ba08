"""
Working example: Submit a production to Celery.
Requires Redis and a Celery worker running:

    celery -A studio.celery_app worker -Q default,production
"""
import time


def submit_job():
    """Submit a production job to the Celery worker."""
    from studio.tasks import get_task_status, produce_episode_task

    request_json = {
        "project_id": "celery_demo_001",
        "user_id": "demo_user",
        "title": "Harbor at Night",
        "genre": "drama",
        "scenes": [
            {
                "id": "scene-1",
                "title": "Arrival",
                "description": "A fishing boat drifts into a fog-covered harbor",
                "duration": 10,
                "mood": "mysterious",
                "dialogue": ["Someone left the beacon dark tonight."],
            },
            {
                "id": "scene-2",
                "title": "The Keeper",
                "description": "An old keeper climbs the lighthouse stairs with a lantern",
                "duration": 15,
                "mood": "tense",
                "setting": "lighthouse interior",
            },
        ],
        "settings": {
            "audio_preferences": {"include_music_track": True, "include_voiceover": True},
            "assembly_preferences": {"resolution": "1080p", "transition_type": "dissolve"},
        },
    }

    print("Submitting production job to Celery...")

    task = produce_episode_task.delay(request_json, available_credits=500)

    print(f"Task submitted: {task.id}")
    print("Monitoring progress...")
    print("-" * 50)

    while not task.ready():
        status = get_task_status(task.id)

        if status["status"] == "PROGRESS":
            progress = status.get("progress", {})
            pct = progress.get("progress", 0)
            stage = progress.get("stage", "unknown")
            step = progress.get("current_step", "")
            print(f"[{pct:3d}%] {stage}: {step}")
        else:
            print(f"Status: {status['status']}")

        time.sleep(2)

    print("-" * 50)

    if task.successful():
        result = task.result
        if result["success"]:
            print(f"SUCCESS!")
            print(f"Video: {result['video_url']}")
            print(f"Duration: {result['duration']}s")
            print(f"Credits: {result['credits_used']}/{result['estimated_credits']}")
        else:
            print(f"PRODUCTION FAILED: {result['error']}")
    else:
        print(f"TASK FAILED: {task.result}")


if __name__ == "__main__":
    submit_job()
