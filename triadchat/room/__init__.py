"""Rooms, their members, the room engine and on-disk transcripts."""