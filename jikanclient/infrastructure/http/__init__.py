"""HTTP dispatch: the request pipeline and response error classification."""
