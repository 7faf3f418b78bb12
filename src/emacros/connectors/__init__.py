"""Host collaborators: prompting, recording and playback."""
