"""
Write the impact clip set: audio/note-0.wav … note-<N-1>.wav, one per arc.
Run: venv/bin/python generate_notes.py
"""
from cradle.audio import generate_note_set, note_frequency
import cradle as C

if __name__ == "__main__":
    paths = generate_note_set(C.AUDIO_DIR, C.NUMBER_OF_ARCS)
    for i, path in enumerate(paths):
        print(f"{path}: {note_frequency(i):.1f} Hz")
    print(f"Wrote {len(paths)} notes to {C.AUDIO_DIR}/")
