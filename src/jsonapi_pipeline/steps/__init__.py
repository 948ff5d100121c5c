"""Individual request pipeline steps, run in order by the APIController."""
