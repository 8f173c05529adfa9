"""Extensions bundled with easel."""
